"""Wire a plugin's custom update API into the host's update flow."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

import aiohttp

from remote_updater._constants import (
    DEFAULT_PRIORITY,
    HOOK_DETAIL_VIEW,
    HOOK_OUTBOUND_REQUEST,
    HOOK_PENDING_UPDATES,
    OUTBOUND_REQUEST_PRIORITY,
)
from remote_updater._transport import HttpTransport, Transport
from remote_updater.client import RemoteVersionClient
from remote_updater.config import UpdaterConfig
from remote_updater.engine import PendingUpdates, UpdateEngine
from remote_updater.filtering import filter_outbound_request
from remote_updater.hooks import HookRegistry
from remote_updater.models.identity import ClientIdentity, RemoteCredentials

_logger = logging.getLogger(__name__)


class RemoteUpdater:
    """Lets a plugin served from a custom update API use the host's update UI.

    Construction derives the plugin identity, builds the remote client
    and registers three hooks on *registry*:

    * ``http_request_args`` (priority 5): drop this plugin from bulk
      update checks sent to the default registry.
    * ``pre_set_site_transient_update_plugins``: add this plugin's
      pending update.
    * ``plugins_api``: serve this plugin's detail view.

    Usage::

        async with RemoteUpdater(config, registry) as updater:
            pending = await registry.apply(HOOK_PENDING_UPDATES, pending)
    """

    def __init__(
        self,
        config: UpdaterConfig,
        registry: HookRegistry,
        *,
        transport: Transport | None = None,
        session: aiohttp.ClientSession | None = None,
    ) -> None:
        self._config = config
        self._registry = registry
        self.identity = ClientIdentity.from_config(config)
        self.credentials = RemoteCredentials.from_api_data(config.api_data)

        self._owned_transport: HttpTransport | None = None
        if transport is None:
            self._owned_transport = HttpTransport(
                session=session,
                timeout=config.timeout,
                verify_ssl=config.verify_ssl,
            )
            transport = self._owned_transport

        self.client = RemoteVersionClient(self.identity, self.credentials, transport)
        self.engine = UpdateEngine(self.client)

        self.hook()

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> RemoteUpdater:
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owned_transport is not None:
            await self._owned_transport.close()

    # ------------------------------------------------------------------
    # Hooks
    # ------------------------------------------------------------------

    def hook(self) -> None:
        """Register the updater's handlers. Safe to call more than once."""
        self._registry.register(HOOK_OUTBOUND_REQUEST, self.filter_request, priority=OUTBOUND_REQUEST_PRIORITY)
        self._registry.register(HOOK_PENDING_UPDATES, self.check_updates, priority=DEFAULT_PRIORITY)
        self._registry.register(HOOK_DETAIL_VIEW, self.plugin_details, priority=DEFAULT_PRIORITY)
        _logger.debug("Registered update hooks for %s", self.identity.full_id)

    def filter_request(self, request: Mapping[str, Any], url: str) -> Mapping[str, Any]:
        return filter_outbound_request(
            request,
            url,
            self.identity,
            registry_check_path=self._config.registry_check_path,
        )

    async def check_updates(self, pending: PendingUpdates | None) -> PendingUpdates | None:
        return await self.engine.on_periodic_check(pending)

    async def plugin_details(self, data: Any, action: str = "", args: Any = None) -> Any:
        return await self.engine.on_detail_request(action, args, data)
