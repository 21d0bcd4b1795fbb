"""Version information returned by the update API."""

from __future__ import annotations

from dataclasses import dataclass

from remote_updater.exceptions import EmptyResponseError, UpdaterTransportError
from remote_updater.models._base import UpdaterBaseModel


class VersionInfo(UpdaterBaseModel):
    """Update record handed to the host.

    ``slug`` and ``url`` are filled from the local identity, not from
    the server response.
    """

    new_version: str
    package: str = ""
    slug: str = ""
    url: str = ""


@dataclass(frozen=True, slots=True)
class RemoteCheck:
    """Outcome of one remote call: exactly one of ``info`` / ``error`` is set."""

    info: VersionInfo | None = None
    error: UpdaterTransportError | EmptyResponseError | None = None

    @property
    def ok(self) -> bool:
        return self.info is not None

    @classmethod
    def success(cls, info: VersionInfo) -> RemoteCheck:
        return cls(info=info)

    @classmethod
    def failure(cls, error: UpdaterTransportError | EmptyResponseError) -> RemoteCheck:
        return cls(error=error)
