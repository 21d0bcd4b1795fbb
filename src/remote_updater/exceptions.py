"""Custom exception hierarchy for remote_updater."""

from __future__ import annotations


class UpdaterError(Exception):
    """Base exception for all remote_updater errors."""


class UpdaterConfigError(UpdaterError):
    """Invalid or missing configuration."""


class UpdaterTransportError(UpdaterError):
    """HTTP-level failure (network error, timeout)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        url: str = "",
    ) -> None:
        self.status_code = status_code
        self.url = url
        super().__init__(message)


class EmptyResponseError(UpdaterError):
    """Update API was reachable but returned no usable version object."""

    def __init__(self, message: str, *, action: str = "") -> None:
        self.action = action
        super().__init__(message)


class IdentityMismatchError(UpdaterError):
    """A call was addressed to a different plugin than this client.

    Not a real failure: boundaries catch it and hand their input back.
    """

    def __init__(self, message: str, *, expected: str = "", received: str | None = None) -> None:
        self.expected = expected
        self.received = received
        super().__init__(message)


class MalformedPayloadError(UpdaterError):
    """Bulk-check ``plugins`` body could not be decoded in either format."""
