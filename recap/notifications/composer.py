from recap.models import DigestContent
from recap.notifications.email_template import prepare_email_body, prepare_ticker_section


def compose_digest(group, cache):
    """
    Renders the digest for one user from the snapshot cache.
    Tickers missing from the cache are left out; returns None when none remain.
    """
    snapshots = [cache.get(ticker) for ticker in group.tickers]
    snapshots = [snapshot for snapshot in snapshots if snapshot is not None]
    if not snapshots:
        return None
    sections = [prepare_ticker_section(s, group.categories.get(s.ticker)) for s in snapshots]
    return DigestContent(
        user_id=group.user_id,
        recipient_email=group.email,
        rendered_body=prepare_email_body(group.email, sections),
        tickers=tuple(s.ticker for s in snapshots),
    )
