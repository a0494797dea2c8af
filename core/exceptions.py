"""
Exchange Error Types

Failures raised by the exchange API clients. Venue adapters catch these and
degrade to an empty contribution; they never reach the Query Interface.

Hierarchy:
    ExchangeAPIError
    ├── ExchangeTransportError  - timeout, connection reset, DNS failure
    └── ExchangeProtocolError   - non-200 status, bad envelope code, unexpected shape

    UnknownExchangeError        - a venue name that is not configured
"""

from typing import Optional


class ExchangeAPIError(Exception):
    """Base class for all exchange request failures."""

    def __init__(self, exchange: str, message: str, status: Optional[int] = None) -> None:
        super().__init__(message)
        self.exchange = exchange
        self.message = message
        self.status = status

    def __str__(self) -> str:
        status_str = f" (HTTP {self.status})" if self.status is not None else ""
        return f"{self.exchange}: {self.message}{status_str}"


class ExchangeTransportError(ExchangeAPIError):
    """The request never produced a response (timeout or connection error)."""


class ExchangeProtocolError(ExchangeAPIError):
    """The venue answered, but not with a usable payload."""


class UnknownExchangeError(ValueError):
    """Raised when a venue name is not in the configured set."""

    def __init__(self, name: str, available: list) -> None:
        self.name = name
        self.available = list(available)
        super().__init__(
            f"Exchange '{name}' is not supported. "
            f"Available exchanges: {', '.join(self.available)}"
        )
