"""Instance metadata schemas for the v1 and v2 endpoints.

The two endpoints describe the same server with different shapes and are
kept as unrelated models; callers choose one by calling the matching client
method.
"""

from __future__ import annotations

from typing import Any

from pydantic import Field, model_validator

from mastoclient.schemas import ApiModel
from mastoclient.schemas.account import Account

__all__ = [
    "Instance",
    "InstanceConfig",
    "InstanceStats",
    "InstanceV2",
    "Rule",
]

# Option name -> value. The set of keys differs between server versions.
InstanceConfigMap = dict[str, Any]


class InstanceConfig(ApiModel):
    """Client-facing limits published by the v1 endpoint."""

    accounts: InstanceConfigMap | None = None
    statuses: InstanceConfigMap | None = None
    media_attachments: InstanceConfigMap | None = None
    polls: InstanceConfigMap | None = None


class InstanceStats(ApiModel):
    user_count: int = 0
    status_count: int = 0
    domain_count: int = 0


class Instance(ApiModel):
    """Response of ``GET /api/v1/instance``."""

    uri: str = ""
    title: str = ""
    description: str = ""
    email: str = ""
    version: str = ""
    thumbnail: str = ""
    urls: dict[str, str] = Field(default_factory=dict)
    stats: InstanceStats | None = None
    languages: list[str] = Field(default_factory=list)
    contact_account: Account | None = None
    configuration: InstanceConfig | None = None

    def get_config(self) -> InstanceConfig | None:
        """Return the decoded configuration block as-is."""
        return self.configuration


class Rule(ApiModel):
    id: str = ""
    text: str = ""


class UsageUsers(ApiModel):
    active_month: int = 0


class Usage(ApiModel):
    users: UsageUsers = Field(default_factory=UsageUsers)


class ThumbnailVersions(ApiModel):
    one_x: Any = Field(default=None, alias="@1x")
    two_x: Any = Field(default=None, alias="@2x")


class Thumbnail(ApiModel):
    url: str = ""
    blurhash: Any = None
    versions: ThumbnailVersions = Field(default_factory=ThumbnailVersions)


class ConfigurationUrls(ApiModel):
    streaming: str = ""


class ConfigurationAccounts(ApiModel):
    max_featured_tags: int = 0


class ConfigurationStatuses(ApiModel):
    max_characters: int = 0
    max_media_attachments: int = 0
    characters_reserved_per_url: int = 0


class ConfigurationMediaAttachments(ApiModel):
    supported_mime_types: list[str] = Field(default_factory=list)
    image_size_limit: int = 0
    image_matrix_limit: int = 0
    video_size_limit: int = 0
    video_frame_rate_limit: int = 0
    video_matrix_limit: int = 0


class ConfigurationPolls(ApiModel):
    max_options: int = 0
    max_characters_per_option: int = 0
    min_expiration: int = 0
    max_expiration: int = 0


class ConfigurationTranslation(ApiModel):
    enabled: bool = False


class InstanceV2Configuration(ApiModel):
    urls: ConfigurationUrls = Field(default_factory=ConfigurationUrls)
    accounts: ConfigurationAccounts = Field(default_factory=ConfigurationAccounts)
    statuses: ConfigurationStatuses = Field(default_factory=ConfigurationStatuses)
    media_attachments: ConfigurationMediaAttachments = Field(
        default_factory=ConfigurationMediaAttachments
    )
    polls: ConfigurationPolls = Field(default_factory=ConfigurationPolls)
    translation: ConfigurationTranslation = Field(default_factory=ConfigurationTranslation)


class Registrations(ApiModel):
    enabled: bool = False
    approval_required: bool = False
    message: Any = None


class Contact(ApiModel):
    """Staff contact. The account key is matched without regard to case."""

    email: str = ""
    account: Account | None = Field(default=None, serialization_alias="Account")

    @model_validator(mode="before")
    @classmethod
    def _match_account_key(cls, data: Any) -> Any:
        if not isinstance(data, dict) or "account" in data:
            return data
        for key in data:
            if isinstance(key, str) and key.lower() == "account":
                return {**data, "account": data[key]}
        return data


class InstanceV2(ApiModel):
    """Response of ``GET /api/v2/instance``."""

    domain: str = ""
    title: str = ""
    version: str = ""
    source_url: str = ""
    description: str = ""
    usage: Usage = Field(default_factory=Usage)
    thumbnail: Thumbnail = Field(default_factory=Thumbnail)
    languages: list[str] = Field(default_factory=list)
    configuration: InstanceV2Configuration = Field(default_factory=InstanceV2Configuration)
    registrations: Registrations = Field(default_factory=Registrations)
    contact: Contact = Field(default_factory=Contact)
    rules: list[Rule] = Field(default_factory=list)
