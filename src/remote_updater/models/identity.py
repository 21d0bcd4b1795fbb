"""Client identity and credentials derived once at construction."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from pathlib import PurePosixPath
from typing import Any
from urllib.parse import quote_plus

from pydantic import Field

from remote_updater.config import UpdaterConfig
from remote_updater.exceptions import UpdaterConfigError
from remote_updater.models._base import UpdaterBaseModel


def _trailing_slash(url: str) -> str:
    return url.rstrip("/\\") + "/"


def _as_posix(path: str) -> PurePosixPath:
    return PurePosixPath(path.replace("\\", "/"))


def _relative_parts(path: PurePosixPath) -> tuple[str, ...]:
    return path.parts[1:] if path.is_absolute() else path.parts


def derive_full_id(plugin_file: str, plugins_dir: str | None = None) -> str:
    """Return the ``<folder>/<file>`` id the host uses as the plugin's map key."""
    path = _as_posix(plugin_file)
    if plugins_dir:
        try:
            return path.relative_to(_as_posix(plugins_dir)).as_posix()
        except ValueError:
            pass
    parts = _relative_parts(path)[-2:]
    if not parts:
        raise UpdaterConfigError(f"Cannot derive plugin id from {plugin_file!r}")
    return PurePosixPath(*parts).as_posix()


def urlencode_deep(value: Any) -> Any:
    """URL-escape every string and number in *value*, recursing into containers."""
    if isinstance(value, bool) or value is None:
        return value
    if isinstance(value, str):
        return quote_plus(value)
    if isinstance(value, (int, float)):
        return quote_plus(str(value))
    if isinstance(value, Mapping):
        return {k: urlencode_deep(v) for k, v in value.items()}
    if isinstance(value, Sequence):
        return [urlencode_deep(v) for v in value]
    return value


class ClientIdentity(UpdaterBaseModel):
    """Who this client is, from the host's and the update API's point of view."""

    api_url: str
    slug: str
    full_id: str
    current_version: str

    @property
    def folder(self) -> str:
        """Directory portion of :attr:`full_id`, ``""`` for single-file plugins."""
        parent = PurePosixPath(self.full_id).parent.as_posix()
        return "" if parent == "." else parent

    @classmethod
    def from_config(cls, config: UpdaterConfig) -> ClientIdentity:
        version = config.api_data.get("version")
        if version in (None, ""):
            raise UpdaterConfigError("api_data must contain the installed 'version'")
        if not config.api_url:
            raise UpdaterConfigError("api_url must not be empty")

        slug = _as_posix(config.plugin_file).stem
        if not slug:
            raise UpdaterConfigError(f"Cannot derive slug from {config.plugin_file!r}")

        return cls(
            api_url=_trailing_slash(config.api_url),
            slug=slug,
            full_id=derive_full_id(config.plugin_file, config.plugins_dir),
            current_version=str(version),
        )


class RemoteCredentials(UpdaterBaseModel):
    """Values merged into every remote request body.

    All values are URL-escaped when the credentials are built.
    """

    product: str = ""
    key: str = ""
    extra: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_api_data(cls, api_data: Mapping[str, Any]) -> RemoteCredentials:
        escaped: dict[str, Any] = urlencode_deep(dict(api_data))
        return cls(
            product=escaped.get("product", ""),
            key=escaped.get("key", ""),
            extra={k: v for k, v in escaped.items() if k not in ("product", "key")},
        )

    def params(self) -> dict[str, Any]:
        """Return the flat parameter mapping sent with a request."""
        return {**self.extra, "product": self.product, "key": self.key}
