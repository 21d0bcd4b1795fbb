"""Base model for remote_updater data types.

Every model inherits from :class:`UpdaterBaseModel` which provides:

* Frozen instances, so identity values derived at construction can
  never drift afterwards.
* A ``model_validator(mode="before")`` that drops ``None`` and blank
  strings so the field default is used instead. Update servers are
  loose about what they send for "not available".
* Numbers coerced to strings, since version strings such as ``2.1``
  regularly arrive as JSON numbers.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, model_validator


class UpdaterBaseModel(BaseModel):
    """Base for remote_updater models."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        coerce_numbers_to_str=True,
    )

    @staticmethod
    def _clean_dict(values: dict[str, Any]) -> dict[str, Any]:
        """Strip ``None`` and blank string values from *values*."""
        cleaned: dict[str, Any] = {}
        for key, value in values.items():
            if value is None:
                continue
            if isinstance(value, str) and not value.strip():
                continue
            cleaned[key] = value
        return cleaned

    @model_validator(mode="before")
    @classmethod
    def _clean_values(cls, values: Any) -> Any:
        if not isinstance(values, dict):
            return values
        return UpdaterBaseModel._clean_dict(values)
