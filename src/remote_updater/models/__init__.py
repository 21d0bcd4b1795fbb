"""Data models for remote_updater."""

from remote_updater.models._base import UpdaterBaseModel
from remote_updater.models.identity import ClientIdentity, RemoteCredentials
from remote_updater.models.version import RemoteCheck, VersionInfo

__all__ = [
    "ClientIdentity",
    "RemoteCheck",
    "RemoteCredentials",
    "UpdaterBaseModel",
    "VersionInfo",
]
