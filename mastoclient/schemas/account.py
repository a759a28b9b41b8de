"""Account entity referenced by instance contact fields."""

from __future__ import annotations

from datetime import datetime

from pydantic import Field, field_validator

from mastoclient.schemas import ApiModel


class Emoji(ApiModel):
    shortcode: str = ""
    static_url: str = ""
    url: str = ""
    visible_in_picker: bool = False


class AccountField(ApiModel):
    name: str = ""
    value: str = ""
    verified_at: datetime | None = None


class Account(ApiModel):
    id: str = ""
    username: str = ""
    acct: str = ""
    display_name: str = ""
    locked: bool = False
    bot: bool = False
    discoverable: bool = False
    group: bool = False
    created_at: datetime | None = None
    note: str = ""
    url: str = ""
    avatar: str = ""
    avatar_static: str = ""
    header: str = ""
    header_static: str = ""
    followers_count: int = 0
    following_count: int = 0
    statuses_count: int = 0
    last_status_at: str = ""
    emojis: list[Emoji] = Field(default_factory=list)
    fields: list[AccountField] = Field(default_factory=list)

    @field_validator("id", mode="before")
    @classmethod
    def _id_as_string(cls, value: object) -> object:
        # Some servers send numeric ids.
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value
