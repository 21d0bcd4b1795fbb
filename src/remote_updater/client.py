"""Async client for the custom update API."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from remote_updater._api.remote import build_request_body, merge_params, parse_version_response
from remote_updater._transport import Transport
from remote_updater.exceptions import (
    EmptyResponseError,
    IdentityMismatchError,
    UpdaterTransportError,
)
from remote_updater.models.identity import ClientIdentity, RemoteCredentials
from remote_updater.models.version import RemoteCheck, VersionInfo

_logger = logging.getLogger(__name__)


class RemoteVersionClient:
    """Issues version queries for one plugin against its update API.

    Holds no mutable state: concurrent calls on one instance are safe.

    Usage::

        client = RemoteVersionClient(identity, credentials, transport)
        check = await client.check_remote("plugin_latest_version", {"slug": identity.slug})
        if check is not None and check.ok:
            print(check.info.new_version)
    """

    def __init__(
        self,
        identity: ClientIdentity,
        credentials: RemoteCredentials,
        transport: Transport,
    ) -> None:
        self._identity = identity
        self._credentials = credentials
        self._transport = transport

    @property
    def identity(self) -> ClientIdentity:
        return self._identity

    async def fetch(self, action: str, params: Mapping[str, Any]) -> VersionInfo:
        """Query the update API, raising on any failure.

        Raises
        ------
        IdentityMismatchError
            ``params["slug"]`` is not this client's slug. No request is sent.
        UpdaterTransportError
            Network failure or timeout.
        EmptyResponseError
            The reply carried no usable version object.
        """
        merged = merge_params(self._identity, self._credentials, params)
        body = build_request_body(action, self._identity, merged)
        text = await self._transport.post_form(self._identity.api_url, body)
        return parse_version_response(text, self._identity, action=action)

    async def check_remote(self, action: str, params: Mapping[str, Any]) -> RemoteCheck | None:
        """Query the update API and report the outcome instead of raising.

        Returns ``None`` when the call is addressed to another plugin,
        otherwise a :class:`RemoteCheck` holding either the version info
        or the transport/empty-response error.
        """
        try:
            info = await self.fetch(action, params)
        except IdentityMismatchError as exc:
            # Not addressed to this plugin.
            _logger.debug("Skipping %s: %s", action, exc)
            return None
        except (UpdaterTransportError, EmptyResponseError) as exc:
            _logger.debug("%s for %s failed: %s", action, self._identity.slug, exc)
            return RemoteCheck.failure(exc)
        return RemoteCheck.success(info)
