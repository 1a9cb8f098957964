"""Exceptions raised by the PayHub connector.

Only infrastructure failures are raised. Declines and malformed processor
responses are returned as a failed PaymentResult instead.
"""

from typing import Optional


class PayHubError(Exception):
    """Base exception for PayHub connector errors."""

    pass


class ConfigurationError(PayHubError, ValueError):
    """Raised at construction when a required credential is missing."""

    pass


class TransportError(PayHubError):
    """Base exception for failures of the HTTP transport."""

    pass


class NetworkError(TransportError):
    """
    Raised when the network call itself fails and no response body exists.

    Examples:
    - Connection refused / DNS failure
    - Read or connect timeout
    """

    pass


class ResponseError(TransportError):
    """
    Raised when PayHub answers with a non-2xx status.

    The connector turns this into a failed PaymentResult when ``body`` is
    present. Without a body there is nothing to interpret and it propagates.
    """

    def __init__(self, status_code: int, body: Optional[str] = None):
        super().__init__(f"PayHub returned HTTP {status_code}")
        self.status_code = status_code
        self.body = body
