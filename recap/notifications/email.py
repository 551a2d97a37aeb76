import os
import smtplib
from email.mime.text import MIMEText
from email.utils import formataddr
from recap.errors import DispatchError
from recap.logging import log_event

FROM_NAME = "Recap Team"


class SmtpNotifier:
    """Sends HTML emails over SMTP with STARTTLS."""

    def __init__(self, host, port, user, password, from_email=None, timeout=10, smtp_factory=smtplib.SMTP):
        self.host = host
        self.port = port
        self.user = user
        self.password = password
        self.from_email = from_email or user
        self.timeout = timeout
        self.smtp_factory = smtp_factory

    def send(self, to_email, subject, body):
        """
        Sends an HTML email to the specified recipient.
        Raises DispatchError if the server cannot be reached or rejects the message.
        """
        log_event("INFO", "Preparing to send email", to=to_email, subject=subject, github_sha=os.getenv("GITHUB_SHA"))
        msg = MIMEText(body, "html")
        msg['Subject'] = subject
        msg['From'] = formataddr((FROM_NAME, self.from_email))
        msg['To'] = to_email
        try:
            with self.smtp_factory(self.host, self.port, timeout=self.timeout) as server:
                server.starttls()
                server.login(self.user, self.password)
                server.sendmail(self.from_email, [to_email], msg.as_string())
        except (smtplib.SMTPException, OSError) as e:
            raise DispatchError(to_email, e) from e
        log_event("INFO", "Email sent", to=to_email, subject=subject)
