"""
Weekly recap run: read subscriptions, fetch market data once per unique ticker,
then compose and send one digest email per user.
"""
from recap.aggregation import aggregate_subscriptions
from recap.db import SupabaseSubscriptionSource, get_supabase_client
from recap.logging import log_event
from recap.market.client import MarketDataClient
from recap.market.finnhub import FinnhubMarketData
from recap.market.scheduler import RateLimitedFetcher
from recap.market.yahoo import YahooMarketData
from recap.models import RunSummary
from recap.notifications.composer import compose_digest
from recap.notifications.dispatch import Dispatcher
from recap.notifications.email import SmtpNotifier


class RecapPipeline:

    def __init__(self, source, fetcher, dispatcher):
        self.source = source
        self.fetcher = fetcher
        self.dispatcher = dispatcher

    def run(self):
        """
        Executes one complete run and returns its RunSummary.
        Ticker and send failures are absorbed into the summary counts.
        """
        summary = RunSummary()
        log_event("INFO", "Starting weekly digest generation")
        try:
            subscriptions = self.source.fetch_subscriptions()
        except Exception as e:
            log_event("ERROR", "Error fetching tickers and users", error=str(e))
            return summary

        groups, unique_tickers, dropped = aggregate_subscriptions(subscriptions)
        summary.rows_dropped = dropped
        summary.users_considered = len(groups)

        # the fetch phase completes before any digest is composed
        cache, failed = self.fetcher.fetch_all(unique_tickers)
        summary.tickers_fetched = len(cache)
        summary.tickers_failed = len(failed)

        subject = self.dispatcher.subject()
        for group in groups.values():
            digest = compose_digest(group, cache)
            if digest is None:
                log_event("INFO", "No market data for any subscribed ticker, skipping user", user_id=group.user_id)
                summary.users_skipped_empty += 1
                continue
            result = self.dispatcher.dispatch(digest, subject)
            if result.ok:
                summary.users_dispatched += 1
            else:
                summary.sends_failed += 1

        log_event("INFO", "Run summary", **summary.as_dict())
        return summary


def build_market_data_provider(settings):
    if settings.market_data_provider == "yfinance":
        return YahooMarketData()
    return FinnhubMarketData(settings.finnhub_api_key, timeout=settings.request_timeout_seconds)


def build_pipeline(settings):
    """Binds the concrete Supabase, market data and SMTP providers from Settings."""
    source = SupabaseSubscriptionSource(get_supabase_client(settings.supabase_url, settings.supabase_key))
    client = MarketDataClient(
        build_market_data_provider(settings),
        lookback_days=settings.lookback_days,
        headlines_per_digest=settings.headlines_per_digest,
    )
    fetcher = RateLimitedFetcher(client, delay_seconds=settings.ticker_delay_seconds)
    notifier = SmtpNotifier(
        settings.smtp_host,
        settings.smtp_port,
        settings.email_user,
        settings.email_pass,
        from_email=settings.email_from,
        timeout=settings.request_timeout_seconds,
    )
    return RecapPipeline(source, fetcher, Dispatcher(notifier))
