"""Remote version endpoint: request building and response parsing.

The update API takes a single form POST:

``action``
    ``plugin_latest_version`` or ``plugin_information``.
``key`` / ``product`` / ``version``
    From the construction data.
``slug``
    Always the local slug, whatever the caller passed.

and answers with a JSON object carrying at least ``new_version`` and
``package``.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from remote_updater._constants import REMOTE_ACTIONS
from remote_updater.exceptions import EmptyResponseError, IdentityMismatchError
from remote_updater.models.identity import ClientIdentity, RemoteCredentials
from remote_updater.models.version import VersionInfo


def merge_params(
    identity: ClientIdentity,
    credentials: RemoteCredentials,
    params: Mapping[str, Any],
) -> dict[str, Any]:
    """Merge caller *params* over the credentials.

    Raises :class:`IdentityMismatchError` when the merged ``slug`` is
    not this client's slug.
    """
    merged = {**credentials.params(), **params}
    slug = merged.get("slug")
    if slug != identity.slug:
        raise IdentityMismatchError(
            f"Request for {slug!r} is not addressed to {identity.slug!r}",
            expected=identity.slug,
            received=None if slug is None else str(slug),
        )
    return merged


def build_request_body(action: str, identity: ClientIdentity, merged: Mapping[str, Any]) -> dict[str, str]:
    """Build the form fields for *action*."""
    if action not in REMOTE_ACTIONS:
        raise ValueError(f"action must be one of {sorted(REMOTE_ACTIONS)}, got {action!r}")

    return {
        "action": action,
        "key": str(merged.get("key") or ""),
        "product": str(merged.get("product") or ""),
        "version": str(merged.get("version") or ""),
        "slug": identity.slug,
    }


def parse_version_response(text: str, identity: ClientIdentity, *, action: str = "") -> VersionInfo:
    """Decode the update API's reply into a :class:`VersionInfo`.

    Raises :class:`EmptyResponseError` unless the body is a non-empty
    JSON object with a ``new_version``.
    """
    try:
        response = json.loads(text)
    except (json.JSONDecodeError, TypeError):
        response = None

    if not isinstance(response, dict) or not response:
        raise EmptyResponseError(f"No version object in {action or 'update API'} response", action=action)

    try:
        return VersionInfo(
            new_version=response.get("new_version"),
            package=response.get("package"),
            slug=identity.slug,
            url=identity.api_url,
        )
    except ValidationError as exc:
        raise EmptyResponseError(f"Unusable {action or 'update API'} response: {exc}", action=action) from exc
