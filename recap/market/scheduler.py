import time
from recap.errors import TickerFetchError
from recap.logging import log_event
from recap.market.cache import SnapshotCache


class RateLimitedFetcher:
    """
    Fetches every unique ticker exactly once, one after the other, waiting so that
    consecutive fetch starts are at least `delay_seconds` apart.

    Tickers are never fetched concurrently: the delay models the provider's
    requests-per-second ceiling.
    """

    def __init__(self, client, delay_seconds=1.0, clock=time.monotonic, sleep=time.sleep):
        self.client = client
        self.delay_seconds = delay_seconds
        self._clock = clock
        self._sleep = sleep

    def _wait_for_slot(self, last_start):
        if last_start is None:
            return
        remaining = self.delay_seconds - (self._clock() - last_start)
        if remaining > 0:
            self._sleep(remaining)

    def fetch_all(self, tickers):
        """
        Returns (cache, failed) where cache is the frozen SnapshotCache and failed
        lists the tickers whose snapshot could not be built.
        """
        cache = SnapshotCache()
        failed = []
        last_start = None
        for ticker in sorted(tickers):
            self._wait_for_slot(last_start)
            last_start = self._clock()
            try:
                snapshot = self.client.fetch_snapshot(ticker)
            except TickerFetchError as e:
                log_event("ERROR", f"Error processing {ticker}", ticker=ticker, operation=e.operation, error=str(e.cause))
                failed.append(ticker)
                continue
            except Exception as e:
                log_event("ERROR", f"Error processing {ticker}", ticker=ticker, error=str(e))
                failed.append(ticker)
                continue
            cache.put(snapshot)
            log_event("INFO", "Fetched market snapshot", ticker=ticker, close_price=snapshot.close_price)
        cache.freeze()
        log_event("INFO", "Data collection complete", fetched=len(cache), failed=len(failed))
        return cache, failed
