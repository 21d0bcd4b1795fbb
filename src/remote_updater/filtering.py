"""Keep this plugin out of the default registry's bulk update checks.

The host asks the default registry about every installed plugin. A
plugin served from a custom update API would either come back unknown
or, worse, match an unrelated registry plugin of the same name, so its
entry is removed from the outgoing request before it is sent.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import PurePosixPath
from typing import Any

from remote_updater._constants import DEFAULT_REGISTRY_CHECK_PATH
from remote_updater.codec import PayloadEncoding, decode_payload, encode_payload
from remote_updater.models.identity import ClientIdentity

_logger = logging.getLogger(__name__)


def _folder_of(plugin_id: Any) -> str:
    return PurePosixPath(str(plugin_id)).parent.as_posix()


def remove_component_entry(plugins: Mapping[Any, Any], identity: ClientIdentity) -> dict[Any, Any]:
    """Return a copy of *plugins* without this client's entry.

    Entries are matched on their containing folder rather than the full
    id, because a plugin's main file name may change between releases.
    Single-file plugins have no folder and are matched on the full id.
    Only the last matching entry is removed.
    """
    folder = identity.folder
    to_remove: Any = None
    for plugin_id in plugins:
        if folder:
            if _folder_of(plugin_id) == folder:
                to_remove = plugin_id
        elif str(plugin_id) == identity.full_id:
            to_remove = plugin_id

    remaining = dict(plugins)
    if to_remove is not None:
        _logger.debug("Removing %s from default registry update check", to_remove)
        del remaining[to_remove]
    return remaining


def filter_outbound_request(
    request: Mapping[str, Any],
    url: str,
    identity: ClientIdentity,
    *,
    registry_check_path: str = DEFAULT_REGISTRY_CHECK_PATH,
) -> Mapping[str, Any]:
    """Rewrite a bulk update-check request so it no longer mentions this plugin.

    Requests to any other URL, requests without a ``plugins`` body field
    and requests whose JSON ``plugins`` field cannot be decoded are
    returned as the very same object. A legacy field that cannot be
    decoded is replaced by an empty object. Otherwise a copy is
    returned whose ``body["plugins"]`` is re-encoded in the format it
    arrived in; all other fields are left as they were.
    """
    if registry_check_path not in url:
        return request

    body = request.get("body")
    if not isinstance(body, Mapping):
        return request

    raw_plugins = body.get("plugins")
    if not raw_plugins or not isinstance(raw_plugins, (str, bytes)):
        return request

    payload = decode_payload(raw_plugins)
    if payload.encoding is PayloadEncoding.JSON and not payload.data:
        # Undecodable JSON goes out as sent rather than with every entry dropped.
        return request
    if isinstance(payload.data.get("plugins"), dict):
        payload = payload.with_plugins(remove_component_entry(payload.plugins, identity))

    return {**request, "body": {**body, "plugins": encode_payload(payload)}}
