"""Update decisions for the host's two update call sites.

* The periodic bulk check, where the host collects pending updates for
  every installed plugin.
* The on-demand detail view for a single plugin.

Both absorb remote failures: the host sees "no update" or its own
fallback data, never an exception.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, MutableMapping
from typing import Any, TypeVar

from remote_updater._constants import ACTION_INFORMATION, ACTION_LATEST_VERSION
from remote_updater.client import RemoteVersionClient
from remote_updater.models.version import VersionInfo
from remote_updater.versioning import is_newer

_logger = logging.getLogger(__name__)

T = TypeVar("T")

PendingUpdates = MutableMapping[str, Any]


def _args_slug(args: Any) -> Any:
    if args is None:
        return None
    if isinstance(args, Mapping):
        return args.get("slug")
    return getattr(args, "slug", None)


class UpdateEngine:
    """Feeds remote version data into the host's update flow."""

    def __init__(self, client: RemoteVersionClient) -> None:
        self._client = client
        self._identity = client.identity

    async def on_periodic_check(self, pending: PendingUpdates | None) -> PendingUpdates | None:
        """Upsert this plugin's update record into *pending* when one is available.

        An empty or missing collection is returned untouched: the host
        has not run its own check yet, so there is nothing to augment.
        Only this plugin's key is ever written.
        """
        if not pending:
            return pending

        check = await self._client.check_remote(ACTION_LATEST_VERSION, {"slug": self._identity.slug})
        if check is None or check.info is None:
            # Failure absorbed: the update notice simply does not appear.
            return pending

        if is_newer(self._identity.current_version, check.info.new_version):
            _logger.debug(
                "Update available for %s: %s -> %s",
                self._identity.full_id,
                self._identity.current_version,
                check.info.new_version,
            )
            pending[self._identity.full_id] = check.info
        return pending

    async def on_detail_request(self, action: str, args: Any, fallback: T) -> VersionInfo | T:
        """Return this plugin's details for the host's detail view.

        Calls for another action or another plugin, and failed remote
        calls, get *fallback* back unchanged.
        """
        if action != ACTION_INFORMATION or _args_slug(args) != self._identity.slug:
            return fallback

        check = await self._client.check_remote(ACTION_INFORMATION, {"slug": self._identity.slug})
        if check is None or check.info is None:
            return fallback
        return check.info
