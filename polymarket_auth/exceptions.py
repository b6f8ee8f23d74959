"""
Custom exceptions for the Polymarket authentication core.

Three families of failure are distinguished:
- input validation (malformed keys, addresses, signatures, amounts)
- server rejection (the exchange refused the request or auth headers)
- state transitions (creating/deriving API credentials failed)
"""

from typing import Optional, Any


class PolymarketError(Exception):
    """Base exception for all Polymarket errors."""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ValidationError(PolymarketError):
    """Input validation failed. Never retried."""
    pass


class SigningError(PolymarketError):
    """Signing primitive failed unexpectedly."""
    pass


class APIError(PolymarketError):
    """API request failed."""

    def __init__(self, message: str, status_code: Optional[int] = None,
                 response: Optional[Any] = None):
        super().__init__(message, {"status_code": status_code, "response": response})
        self.status_code = status_code
        self.response = response


class AuthenticationError(APIError):
    """Exchange rejected the authentication headers (bad/stale signature, unknown key)."""
    pass


class TimeoutError(APIError):
    """Request timed out."""
    pass


class StateTransitionError(APIError):
    """
    Upgrading a client to API-key level failed.

    The originating client is left untouched; the underlying
    transport or server error is available as ``__cause__``.
    """

    def __init__(self, message: str, status_code: Optional[int] = None,
                 response: Optional[Any] = None, operation: Optional[str] = None):
        super().__init__(message, status_code=status_code, response=response)
        self.operation = operation
        self.details["operation"] = operation
