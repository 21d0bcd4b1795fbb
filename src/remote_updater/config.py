"""Client configuration for remote_updater."""

from __future__ import annotations

import dataclasses
import os
from collections.abc import Mapping
from typing import Any

from remote_updater._constants import DEFAULT_REGISTRY_CHECK_PATH, REQUEST_TIMEOUT


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


@dataclasses.dataclass(frozen=True)
class UpdaterConfig:
    """Updater configuration.

    Parameters
    ----------
    api_url : str
        URL of the custom update API. A trailing slash is added when
        the identity is derived.
    plugin_file : str
        Path to the plugin's main file. The slug and full id are
        derived from it.
    api_data : Mapping
        Data sent with every API call. Must contain ``version``;
        ``key`` and ``product`` are sent when present, any other
        entries are kept as extra parameters.
    plugins_dir : str or None
        Host plugins directory. When set, the full id is the path of
        ``plugin_file`` relative to it; otherwise the last two path
        components are used.
    timeout : float
        Seconds before a remote request is abandoned.
    verify_ssl : bool
        Verify the update API's TLS certificate. Off by default to
        match the deployed update servers, most of which run with
        self-signed certificates.
    registry_check_path : str
        URL substring identifying the default registry's bulk
        update-check endpoint.
    """

    api_url: str
    plugin_file: str
    api_data: Mapping[str, Any] = dataclasses.field(default_factory=dict)
    plugins_dir: str | None = None
    timeout: float = REQUEST_TIMEOUT
    verify_ssl: bool = False
    registry_check_path: str = DEFAULT_REGISTRY_CHECK_PATH

    @classmethod
    def from_env(cls, **overrides: Any) -> UpdaterConfig:
        """Create configuration from environment variables.

        Reads ``REMOTE_UPDATER_API_URL``, ``REMOTE_UPDATER_PLUGIN_FILE`` and
        the optional ``REMOTE_UPDATER_*`` variables. Explicit keyword
        arguments override environment values.
        """
        env = os.environ

        _ENV_API_DATA_MAP = {
            "REMOTE_UPDATER_KEY": "key",
            "REMOTE_UPDATER_PRODUCT": "product",
            "REMOTE_UPDATER_VERSION": "version",
        }
        api_data: dict[str, Any] = {}
        for env_key, field_name in _ENV_API_DATA_MAP.items():
            val = env.get(env_key)
            if val is not None:
                api_data[field_name] = val

        # Allow overriding individual api_data entries via a nested dict
        api_data_overrides = overrides.pop("api_data", None)
        if isinstance(api_data_overrides, Mapping):
            api_data.update(api_data_overrides)

        _ENV_CONFIG_MAP = {
            "REMOTE_UPDATER_API_URL": "api_url",
            "REMOTE_UPDATER_PLUGIN_FILE": "plugin_file",
            "REMOTE_UPDATER_PLUGINS_DIR": "plugins_dir",
            "REMOTE_UPDATER_REGISTRY_CHECK_PATH": "registry_check_path",
        }
        config_kwargs: dict[str, Any] = {"api_data": api_data}
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        timeout_env = env.get("REMOTE_UPDATER_TIMEOUT")
        if timeout_env is not None and "timeout" not in overrides:
            config_kwargs["timeout"] = float(timeout_env)

        if "verify_ssl" not in overrides:
            config_kwargs["verify_ssl"] = _env_bool(env.get("REMOTE_UPDATER_VERIFY_SSL"), False)

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
