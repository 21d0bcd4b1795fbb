"""Codec for the ``plugins`` field of bulk update-check request bodies.

Hosts send the installed-plugin list in one of two encodings:

* JSON (current hosts), decoded into a plain dict.
* PHP ``serialize()`` of a ``stdClass`` object (legacy hosts). The outer
  object is coerced to a dict; nested values keep their PHP types so the
  body re-encodes the way it arrived.

:func:`decode_payload` records which encoding was seen so
:func:`encode_payload` can write the body back in the same format.
"""

from __future__ import annotations

import dataclasses
import json
import logging
import re
from enum import StrEnum
from typing import Any

import phpserialize

from remote_updater.exceptions import MalformedPayloadError

_logger = logging.getLogger(__name__)

# Mirrors the host's strict "is this serialized?" check.
_SERIALIZED_CONTAINER = re.compile(r"^[aO]:[0-9]+:")
_SERIALIZED_SCALAR = re.compile(r"^[bid]:[0-9.E+-]+;$")

_LEGACY_OBJECT_NAME = "stdClass"


class PayloadEncoding(StrEnum):
    JSON = "json"
    LEGACY = "legacy"


@dataclasses.dataclass(frozen=True, slots=True)
class Payload:
    """A decoded ``plugins`` body tagged with the encoding it arrived in."""

    encoding: PayloadEncoding
    data: dict[str, Any]

    @property
    def plugins(self) -> dict[Any, Any]:
        entries = self.data.get("plugins")
        return entries if isinstance(entries, dict) else {}

    def with_plugins(self, plugins: dict[Any, Any]) -> Payload:
        return dataclasses.replace(self, data={**self.data, "plugins": plugins})


def _as_text(raw: str | bytes) -> str:
    if isinstance(raw, bytes):
        return raw.decode("utf-8", errors="replace")
    return raw


def looks_serialized(raw: str | bytes) -> bool:
    """Return ``True`` when *raw* has the shape of a PHP serialized value."""
    data = _as_text(raw).strip()
    if data == "N;":
        return True
    if len(data) < 4 or data[1] != ":":
        return False
    if data[-1] not in ";}":
        return False
    token = data[0]
    if token == "s":
        return data[-2] == '"'
    if token in "aO":
        return _SERIALIZED_CONTAINER.match(data) is not None
    if token in "bid":
        return _SERIALIZED_SCALAR.match(data) is not None
    return False


def detect_encoding(raw: str | bytes) -> PayloadEncoding:
    return PayloadEncoding.LEGACY if looks_serialized(raw) else PayloadEncoding.JSON


def _decode_legacy(raw: str | bytes) -> dict[str, Any]:
    data = raw if isinstance(raw, bytes) else raw.encode("utf-8")
    try:
        value = phpserialize.loads(data.strip(), decode_strings=True, object_hook=phpserialize.phpobject)
    # Unhashable container keys surface as TypeError, runaway nesting as RecursionError.
    except (ValueError, TypeError, RecursionError) as exc:
        raise MalformedPayloadError(f"Invalid serialized plugins payload: {exc!r}") from exc

    if isinstance(value, phpserialize.phpobject):
        value = value._asdict()
    if not isinstance(value, dict):
        raise MalformedPayloadError(f"Serialized plugins payload is a {type(value).__name__}, not an object")
    return value


def _decode_json(raw: str | bytes) -> dict[str, Any]:
    try:
        value = json.loads(raw)
    # ValueError also covers undecodable bytes.
    except (ValueError, RecursionError) as exc:
        raise MalformedPayloadError(f"Invalid JSON plugins payload: {exc!r}") from exc

    if not isinstance(value, dict):
        raise MalformedPayloadError(f"JSON plugins payload is a {type(value).__name__}, not an object")
    return value


def decode_strict(raw: str | bytes) -> Payload:
    """Decode *raw*, raising :class:`MalformedPayloadError` on bad input."""
    encoding = detect_encoding(raw)
    if encoding is PayloadEncoding.LEGACY:
        return Payload(encoding, _decode_legacy(raw))
    return Payload(encoding, _decode_json(raw))


def decode_payload(raw: str | bytes) -> Payload:
    """Decode *raw*, yielding an empty mapping when it cannot be parsed.

    Absorbs :class:`MalformedPayloadError`: skipping the filter is
    preferable to failing the host's whole update check.
    """
    try:
        return decode_strict(raw)
    except MalformedPayloadError as exc:
        _logger.debug("Treating plugins payload as empty: %s", exc)
        return Payload(detect_encoding(raw), {})


def encode_payload(payload: Payload) -> str:
    """Encode *payload* back into the format it was decoded from."""
    if payload.encoding is PayloadEncoding.JSON:
        return json.dumps(payload.data, separators=(",", ":"))
    wrapped = phpserialize.phpobject(_LEGACY_OBJECT_NAME, payload.data)
    return phpserialize.dumps(wrapped).decode("utf-8")
