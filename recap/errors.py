class RecapError(Exception):
    """Base class for errors raised by the weekly recap job."""


class ConfigError(RecapError):
    """Required configuration is missing or invalid. Fatal, checked before any work."""

    def __init__(self, problems):
        self.problems = list(problems)
        super().__init__("Invalid configuration: " + "; ".join(self.problems))


class TickerFetchError(RecapError):
    """One of the market data reads for a ticker failed or timed out."""

    def __init__(self, ticker, operation, cause):
        self.ticker = ticker
        self.operation = operation
        self.cause = cause
        super().__init__(f"{operation} failed for {ticker}: {cause}")


class DispatchError(RecapError):
    """The notification provider rejected or failed to deliver a message."""

    def __init__(self, recipient, cause):
        self.recipient = recipient
        self.cause = cause
        super().__init__(f"Failed to send email to {recipient}: {cause}")
