"""Exception taxonomy for the swap dry-run pipeline.

Fatal errors derive from SwapSimError and abort the run. Expected negative
outcomes (no route, incomplete build response, ledger rejection during
simulation) are reported as results and never raised.
"""

from typing import Optional


class SwapSimError(Exception):
    """Base class for fatal pipeline errors."""

    pass


class ConfigError(SwapSimError):
    """Missing or invalid operator input. Raised before any network call."""

    pass


class NetworkError(SwapSimError):
    """Aggregator request failed (non-2xx status or transport failure)."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        reason: str = "",
        body: str = "",
    ):
        self.status_code = status_code
        self.reason = reason
        self.body = body
        super().__init__(message)

    @classmethod
    def from_response(cls, operation: str, status_code: int, reason: str, body: str) -> "NetworkError":
        """Build error for a non-success HTTP response, keeping the body verbatim."""
        return cls(
            f"{operation} failed: {status_code} {reason} - {body}",
            status_code=status_code,
            reason=reason,
            body=body,
        )


class DecodeError(SwapSimError):
    """Malformed base64 payload or transaction bytes."""

    pass


class SignError(SwapSimError):
    """Local signing failed."""

    pass
