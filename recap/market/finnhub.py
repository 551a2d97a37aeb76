import requests
from recap.logging import log_event

FINNHUB_BASE_URL = "https://finnhub.io/api/v1"


class FinnhubMarketData:
    """Market data reads against the Finnhub REST API (free tier: quote, candles, company news)."""

    def __init__(self, api_key, timeout=10, session=None, base_url=FINNHUB_BASE_URL):
        self.api_key = api_key
        self.timeout = timeout
        self.session = session or requests.Session()
        self.base_url = base_url

    def _get(self, path, **params):
        params["token"] = self.api_key
        r = self.session.get(f"{self.base_url}{path}", params=params, timeout=self.timeout)
        r.raise_for_status()
        return r.json()

    def get_quote(self, ticker):
        j = self._get("/quote", symbol=ticker)
        return {"close": j.get("c"), "high": j.get("h"), "low": j.get("l")}

    def get_daily_series(self, ticker, start, end):
        try:
            j = self._get(
                "/stock/candle",
                symbol=ticker,
                resolution="D",
                **{"from": int(start.timestamp()), "to": int(end.timestamp())},
            )
        except requests.HTTPError as e:
            # plans without candle access get 403; weekly range then comes from the quote
            if e.response is None or e.response.status_code != 403:
                raise
            log_event("WARN", "Daily candles not available, using quote high/low", ticker=ticker, error=str(e))
            return {"highs": [], "lows": []}
        # "no_data" responses carry no h/l arrays
        if j.get("s") != "ok":
            return {"highs": [], "lows": []}
        return {"highs": j.get("h") or [], "lows": j.get("l") or []}

    def get_news(self, ticker, start, end):
        j = self._get(
            "/company-news",
            symbol=ticker,
            **{"from": start.date().isoformat(), "to": end.date().isoformat()},
        )
        if isinstance(j, dict):
            raise ValueError(j.get("error") or "unexpected company-news response")
        return [
            {"headline": item.get("headline"), "datetime": item.get("datetime")}
            for item in j or []
        ]
