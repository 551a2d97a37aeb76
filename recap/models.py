from dataclasses import dataclass, field
from decimal import Decimal, ROUND_HALF_UP

HOLDING = "holding"
WATCHLIST = "watchlist"
CATEGORIES = (HOLDING, WATCHLIST)

NO_NEWS_HEADLINE = "No significant news found."

SENT = "sent"
FAILED = "failed"


def normalize_ticker(ticker):
    """Trims and uppercases a ticker so ' aapl' and 'AAPL' share one cache entry."""
    if ticker is None:
        return ""
    return str(ticker).strip().upper()


def to_price(value):
    """Rounds a provider number to 2 decimals, or None when the value is missing."""
    if value is None:
        return None
    try:
        return Decimal(str(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    except ArithmeticError:
        return None


@dataclass(frozen=True)
class Subscription:
    user_id: str
    ticker: str
    category: str = WATCHLIST
    email: str = None


@dataclass
class UserGroup:
    user_id: str
    email: str
    tickers: list = field(default_factory=list)
    categories: dict = field(default_factory=dict)

    def add(self, ticker, category):
        # a ticker listed under both categories is shown as a holding
        if ticker not in self.categories:
            self.tickers.append(ticker)
            self.categories[ticker] = category
        elif category == HOLDING:
            self.categories[ticker] = HOLDING


@dataclass(frozen=True)
class MarketSnapshot:
    ticker: str
    close_price: Decimal = None
    weekly_high: Decimal = None
    weekly_low: Decimal = None
    headlines: tuple = (NO_NEWS_HEADLINE,)

    @property
    def top_headline(self):
        return self.headlines[0] if self.headlines else NO_NEWS_HEADLINE


@dataclass(frozen=True)
class DigestContent:
    user_id: str
    recipient_email: str
    rendered_body: str
    tickers: tuple = ()


@dataclass(frozen=True)
class DispatchResult:
    recipient_email: str
    outcome: str
    reason: str = None

    @property
    def ok(self):
        return self.outcome == SENT


@dataclass
class RunSummary:
    users_considered: int = 0
    users_dispatched: int = 0
    users_skipped_empty: int = 0
    rows_dropped: int = 0
    tickers_fetched: int = 0
    tickers_failed: int = 0
    sends_failed: int = 0

    def as_dict(self):
        return dict(self.__dict__)
