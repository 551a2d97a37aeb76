from datetime import datetime, timezone
from recap.logging import log_event
from recap.models import DispatchResult, FAILED, SENT


def digest_subject(now):
    return f"Your Weekly Stock Market Recap - {now:%A, %b} {now.day}"


class Dispatcher:
    """
    Sends each digest once through the notifier. A failed send is logged and
    recorded; it never stops the remaining users from being attempted.
    """

    def __init__(self, notifier, now=None):
        self.notifier = notifier
        self._now = now or (lambda: datetime.now(timezone.utc))

    def subject(self):
        return digest_subject(self._now())

    def dispatch(self, digest, subject=None):
        subject = subject or self.subject()
        try:
            self.notifier.send(digest.recipient_email, subject, digest.rendered_body)
        except Exception as e:
            log_event("ERROR", f"Failed to send email to {digest.recipient_email}", to=digest.recipient_email, user_id=digest.user_id, error=str(e))
            return DispatchResult(digest.recipient_email, FAILED, str(e))
        log_event("INFO", f"Successfully dispatched email to {digest.recipient_email}", to=digest.recipient_email, tickers=list(digest.tickers))
        return DispatchResult(digest.recipient_email, SENT)

