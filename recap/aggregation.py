from recap.logging import log_event
from recap.models import CATEGORIES, WATCHLIST, UserGroup, normalize_ticker


def _usable_email(email):
    if email is None:
        return None
    email = str(email).strip()
    return email or None


def aggregate_subscriptions(subscriptions):
    """
    Groups subscription rows by user and collects the distinct tickers.

    Returns (groups, unique_tickers, dropped) where groups maps user_id to a
    UserGroup, unique_tickers is a set of normalized tickers and dropped is the
    number of rows that were skipped. Rows without a usable email or ticker are
    skipped with a warning; they never abort aggregation.
    """
    groups = {}
    unique_tickers = set()
    dropped = 0
    for sub in subscriptions:
        email = _usable_email(sub.email)
        if email is None:
            log_event("WARN", "Skipping subscription with unresolvable email", user_id=sub.user_id, ticker=sub.ticker)
            dropped += 1
            continue
        ticker = normalize_ticker(sub.ticker)
        if not ticker:
            log_event("WARN", "Skipping subscription with empty ticker", user_id=sub.user_id)
            dropped += 1
            continue
        category = sub.category
        if category not in CATEGORIES:
            log_event("WARN", "Unknown subscription category, using watchlist", user_id=sub.user_id, ticker=ticker, category=category)
            category = WATCHLIST

        group = groups.get(sub.user_id)
        if group is None:
            group = groups[sub.user_id] = UserGroup(user_id=sub.user_id, email=email)
        group.add(ticker, category)
        unique_tickers.add(ticker)

    log_event("INFO", "Aggregated subscriptions", unique_tickers=len(unique_tickers), users=len(groups), rows_dropped=dropped)
    return groups, unique_tickers, dropped
