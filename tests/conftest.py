from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field

import pytest

from remote_updater.config import UpdaterConfig
from remote_updater.models.identity import ClientIdentity, RemoteCredentials

PLUGINS_DIR = "/srv/www/wp-content/plugins"


@dataclass
class FakeUpdateApi:
    """Transport double recording every form POST."""

    response: str = '{"new_version": "1.3.0", "package": "https://updates.example.com/my-slug.zip"}'
    error: Exception | None = None
    calls: list[tuple[str, dict[str, str]]] = field(default_factory=list)

    async def post_form(self, url: str, form: Mapping[str, str]) -> str:
        self.calls.append((url, dict(form)))
        if self.error is not None:
            raise self.error
        return self.response


@pytest.fixture
def config() -> UpdaterConfig:
    return UpdaterConfig(
        api_url="https://updates.example.com/api",
        plugin_file=f"{PLUGINS_DIR}/my-slug/my-slug.php",
        api_data={"key": "abc 123", "product": "My Product", "version": "1.2.0"},
        plugins_dir=PLUGINS_DIR,
    )


@pytest.fixture
def identity(config: UpdaterConfig) -> ClientIdentity:
    return ClientIdentity.from_config(config)


@pytest.fixture
def credentials(config: UpdaterConfig) -> RemoteCredentials:
    return RemoteCredentials.from_api_data(config.api_data)


@pytest.fixture
def api() -> FakeUpdateApi:
    return FakeUpdateApi()
