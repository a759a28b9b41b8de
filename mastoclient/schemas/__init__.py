"""Pydantic models decoded from Mastodon API responses."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, model_validator

__all__ = ["ApiModel"]


class ApiModel(BaseModel):
    """Base model for records decoded from API payloads.

    Records are immutable once decoded. Keys the model does not declare are
    ignored, and an explicit JSON ``null`` leaves the field at its default so
    that servers omitting a value and servers sending ``null`` decode alike.
    """

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    @model_validator(mode="before")
    @classmethod
    def _drop_null_values(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {key: value for key, value in data.items() if value is not None}
        return data
