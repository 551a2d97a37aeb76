class SnapshotCache:
    """
    Ticker -> MarketSnapshot for a single run.

    Written only during the fetch phase; freeze() ends that phase and any later
    write raises, so composition never sees a cache that is still filling up.
    """

    def __init__(self):
        self._snapshots = {}
        self._frozen = False

    def put(self, snapshot):
        if self._frozen:
            raise RuntimeError("Snapshot cache is read-only after the fetch phase")
        self._snapshots[snapshot.ticker] = snapshot

    def freeze(self):
        self._frozen = True

    @property
    def frozen(self):
        return self._frozen

    def get(self, ticker):
        return self._snapshots.get(ticker)

    def __contains__(self, ticker):
        return ticker in self._snapshots

    def __len__(self):
        return len(self._snapshots)

    def tickers(self):
        return sorted(self._snapshots)
