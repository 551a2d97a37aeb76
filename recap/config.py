import os
from dataclasses import dataclass
from dotenv import load_dotenv
from recap.errors import ConfigError

load_dotenv()

SMTP_PORT = 587

DEFAULT_PROVIDER = "finnhub"
PROVIDERS = ("finnhub", "yfinance")
DEFAULT_TICKER_DELAY_MS = 1000
DEFAULT_LOOKBACK_DAYS = 7
DEFAULT_HEADLINES_PER_DIGEST = 1
DEFAULT_REQUEST_TIMEOUT_SECONDS = 10


@dataclass(frozen=True)
class Settings:
    supabase_url: str
    supabase_key: str
    email_user: str
    email_pass: str
    email_from: str
    smtp_host: str
    market_data_provider: str = DEFAULT_PROVIDER
    finnhub_api_key: str = None
    smtp_port: int = SMTP_PORT
    ticker_delay_ms: int = DEFAULT_TICKER_DELAY_MS
    lookback_days: int = DEFAULT_LOOKBACK_DAYS
    headlines_per_digest: int = DEFAULT_HEADLINES_PER_DIGEST
    request_timeout_seconds: int = DEFAULT_REQUEST_TIMEOUT_SECONDS

    @property
    def ticker_delay_seconds(self):
        return self.ticker_delay_ms / 1000


def _get(environ, name):
    value = environ.get(name)
    if value is None or not value.strip():
        return None
    return value.strip()


def _get_int(environ, name, default, minimum, problems):
    raw = _get(environ, name)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        problems.append(f"{name} must be an integer (got {raw!r})")
        return default
    if value < minimum:
        problems.append(f"{name} must be >= {minimum} (got {value})")
    return value


def load_settings(environ=None):
    """
    Builds Settings from the environment.
    Raises ConfigError listing every missing or invalid variable, so the job can
    abort before touching the data store or any provider.
    """
    if environ is None:
        environ = os.environ
    problems = []

    required = {}
    for name in ("SUPABASE_URL", "SUPABASE_KEY", "EMAIL_USER", "EMAIL_PASS", "SMTP_HOST"):
        required[name] = _get(environ, name)
        if required[name] is None:
            problems.append(f"{name} is not set")

    provider = (_get(environ, "MARKET_DATA_PROVIDER") or DEFAULT_PROVIDER).lower()
    if provider not in PROVIDERS:
        problems.append(f"MARKET_DATA_PROVIDER must be one of {', '.join(PROVIDERS)} (got {provider!r})")
    finnhub_api_key = _get(environ, "FINNHUB_API_KEY")
    if provider == "finnhub" and finnhub_api_key is None:
        problems.append("FINNHUB_API_KEY is not set")

    ticker_delay_ms = _get_int(environ, "TICKER_DELAY_MS", DEFAULT_TICKER_DELAY_MS, 0, problems)
    lookback_days = _get_int(environ, "LOOKBACK_DAYS", DEFAULT_LOOKBACK_DAYS, 1, problems)
    headlines = _get_int(environ, "HEADLINES_PER_DIGEST", DEFAULT_HEADLINES_PER_DIGEST, 1, problems)
    timeout = _get_int(environ, "REQUEST_TIMEOUT_SECONDS", DEFAULT_REQUEST_TIMEOUT_SECONDS, 1, problems)
    smtp_port = _get_int(environ, "SMTP_PORT", SMTP_PORT, 1, problems)

    if problems:
        raise ConfigError(problems)

    return Settings(
        supabase_url=required["SUPABASE_URL"],
        supabase_key=required["SUPABASE_KEY"],
        email_user=required["EMAIL_USER"],
        email_pass=required["EMAIL_PASS"],
        email_from=_get(environ, "EMAIL_FROM") or required["EMAIL_USER"],
        smtp_host=required["SMTP_HOST"],
        market_data_provider=provider,
        finnhub_api_key=finnhub_api_key,
        smtp_port=smtp_port,
        ticker_delay_ms=ticker_delay_ms,
        lookback_days=lookback_days,
        headlines_per_digest=headlines,
        request_timeout_seconds=timeout,
    )
