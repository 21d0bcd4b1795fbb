"""Version comparison for update decisions."""

from __future__ import annotations

import logging

from packaging.version import InvalidVersion, Version

_logger = logging.getLogger(__name__)


def compare_versions(left: str, right: str) -> int:
    """Return -1, 0 or 1 as *left* is older than, equal to or newer than *right*.

    Raises :class:`packaging.version.InvalidVersion` for unparseable input.
    """
    a, b = Version(left), Version(right)
    return (a > b) - (a < b)


def is_newer(current: str, candidate: str) -> bool:
    """Whether *candidate* is a newer release than *current*.

    Unparseable versions never count as an update.
    """
    try:
        return compare_versions(current, candidate) < 0
    except InvalidVersion as exc:
        _logger.debug("Cannot compare %r with %r: %s", current, candidate, exc)
        return False
