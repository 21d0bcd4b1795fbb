"""Redaction of update API form bodies for debug logs."""

from __future__ import annotations

from collections.abc import Mapping

_SENSITIVE_FIELDS: frozenset[str] = frozenset({"key", "license", "license_key"})


def redact_form(form: Mapping[str, str], *, max_string: int = 200) -> dict[str, str]:
    """Return a copy of *form* with the license key hidden and long values cut."""
    redacted: dict[str, str] = {}
    for name, value in form.items():
        if name.lower() in _SENSITIVE_FIELDS:
            redacted[name] = "<redacted>"
        elif len(value) > max_string:
            redacted[name] = f"{value[:max_string]}…<truncated>"
        else:
            redacted[name] = value
    return redacted
