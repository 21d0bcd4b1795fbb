"""remote_updater - custom update API support for self-hosted plugins."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pyremoteupdater")
except PackageNotFoundError:
    __version__ = "0+local"
from remote_updater.client import RemoteVersionClient
from remote_updater.codec import Payload, PayloadEncoding, decode_payload, encode_payload
from remote_updater.config import UpdaterConfig
from remote_updater.engine import UpdateEngine
from remote_updater.exceptions import (
    EmptyResponseError,
    IdentityMismatchError,
    MalformedPayloadError,
    UpdaterConfigError,
    UpdaterError,
    UpdaterTransportError,
)
from remote_updater.filtering import filter_outbound_request, remove_component_entry
from remote_updater.hooks import FilterRegistry, HookRegistry
from remote_updater.models import ClientIdentity, RemoteCheck, RemoteCredentials, VersionInfo
from remote_updater.updater import RemoteUpdater

__all__ = [
    "__version__",
    "ClientIdentity",
    "EmptyResponseError",
    "FilterRegistry",
    "HookRegistry",
    "IdentityMismatchError",
    "MalformedPayloadError",
    "Payload",
    "PayloadEncoding",
    "RemoteCheck",
    "RemoteCredentials",
    "RemoteUpdater",
    "RemoteVersionClient",
    "UpdateEngine",
    "UpdaterConfig",
    "UpdaterConfigError",
    "UpdaterError",
    "UpdaterTransportError",
    "VersionInfo",
    "decode_payload",
    "encode_payload",
    "filter_outbound_request",
    "remove_component_entry",
]
