import pandas as pd
import yfinance as yf


def _news_title(item):
    return item.get("title") or item.get("content", {}).get("title")


def _news_timestamp(item):
    """
    Publication time as epoch seconds. Older yfinance payloads carry
    providerPublishTime, newer ones nest an ISO pubDate under 'content'.
    """
    published = item.get("providerPublishTime")
    if published:
        return int(published)
    pub_date = item.get("content", {}).get("pubDate")
    if pub_date:
        return int(pd.Timestamp(pub_date).timestamp())
    return None


class YahooMarketData:
    """Market data reads through Yahoo Finance (yfinance). Needs no API key."""

    def __init__(self, ticker_factory=yf.Ticker):
        self.ticker_factory = ticker_factory

    def get_quote(self, ticker):
        hist = self.ticker_factory(ticker).history(period="1d")
        if hist.empty:
            return {"close": None, "high": None, "low": None}
        last = hist.iloc[-1]
        return {"close": last["Close"], "high": last["High"], "low": last["Low"]}

    def get_daily_series(self, ticker, start, end):
        hist = self.ticker_factory(ticker).history(start=start, end=end, interval="1d")
        if hist.empty:
            return {"highs": [], "lows": []}
        hist = hist.dropna(subset=["High", "Low"])
        return {"highs": hist["High"].tolist(), "lows": hist["Low"].tolist()}

    def get_news(self, ticker, start, end):
        raw_news = self.ticker_factory(ticker).news or []
        since = int(start.timestamp())
        news_items = []
        for item in raw_news:
            title = _news_title(item)
            published = _news_timestamp(item)
            if not title:
                continue
            if published is not None and published < since:
                continue
            news_items.append({"headline": title, "datetime": published})
        return news_items
