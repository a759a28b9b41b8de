from __future__ import annotations

import json

import pytest
from pydantic import ValidationError

from mastoclient.schemas.instance import Contact, Instance, InstanceV2

INSTANCE_PAYLOAD = {
    "uri": "mstdn.example.com",
    "title": "mastodon",
    "description": "test mastodon",
    "email": "mstdn@mstdn.example.com",
    "version": "4.1.2",
    "thumbnail": "http://mstdn.example.com/logo.png",
    "urls": {"streaming_api": "wss://mstdn.example.com"},
    "stats": {"user_count": 10, "status_count": 200, "domain_count": 30},
    "languages": ["en", "ja"],
    "contact_account": {"id": "1", "username": "mattn", "acct": "mattn"},
    "configuration": {
        "accounts": {"max_featured_tags": 10},
        "statuses": {"max_characters": 500, "max_media_attachments": 4},
        "media_attachments": {"supported_mime_types": ["image/png"], "image_size_limit": 10485760},
        "polls": {"max_options": 4, "min_expiration": 300},
    },
}


def test_instance_round_trip_is_lossless() -> None:
    first = Instance.model_validate(INSTANCE_PAYLOAD)
    encoded = first.model_dump_json(by_alias=True, exclude_none=True)
    second = Instance.model_validate(json.loads(encoded))
    assert second == first
    assert second.get_config() == first.get_config()


def test_instance_config_keeps_unknown_keys() -> None:
    payload = dict(INSTANCE_PAYLOAD)
    payload["configuration"] = {"statuses": {"brand_new_limit": {"nested": [1, 2]}}}
    cfg = Instance.model_validate(payload).get_config()
    assert cfg is not None
    assert cfg.statuses == {"brand_new_limit": {"nested": [1, 2]}}
    assert cfg.accounts is None


def test_instance_null_values_fall_back_to_defaults() -> None:
    ins = Instance.model_validate(
        {"uri": "x", "thumbnail": None, "languages": None, "urls": None, "configuration": None}
    )
    assert ins.thumbnail == ""
    assert ins.languages == []
    assert ins.urls == {}
    assert ins.get_config() is None


def test_instance_ignores_unknown_fields() -> None:
    ins = Instance.model_validate({"uri": "x", "registrations": True, "rules": []})
    assert ins.uri == "x"


def test_instance_is_immutable() -> None:
    ins = Instance.model_validate(INSTANCE_PAYLOAD)
    with pytest.raises(ValidationError):
        ins.title = "changed"  # type: ignore[misc]


def test_instance_rejects_mistyped_required_shape() -> None:
    with pytest.raises(ValidationError):
        Instance.model_validate({"stats": {"user_count": "lots"}})


def test_instance_v2_defaults_for_missing_sections() -> None:
    ins = InstanceV2.model_validate({"domain": "example.social"})
    assert ins.usage.users.active_month == 0
    assert ins.configuration.translation.enabled is False
    assert ins.contact.account is None
    assert ins.rules == []


@pytest.mark.parametrize("key", ["account", "Account", "ACCOUNT"])
def test_contact_account_key_matches_without_case(key: str) -> None:
    contact = Contact.model_validate({"email": "staff@example.social", key: {"username": "admin"}})
    assert contact.account is not None
    assert contact.account.username == "admin"


def test_instance_v2_round_trip_uses_wire_names() -> None:
    ins = InstanceV2.model_validate(
        {
            "domain": "example.social",
            "thumbnail": {"url": "u", "versions": {"@1x": "a", "@2x": "b"}},
            "contact": {"email": "e", "account": {"id": 7, "username": "admin"}},
        }
    )
    dumped = ins.model_dump(mode="json", by_alias=True, exclude_none=True)
    assert dumped["thumbnail"]["versions"] == {"@1x": "a", "@2x": "b"}
    assert dumped["contact"]["Account"]["id"] == "7"
    assert InstanceV2.model_validate(dumped) == ins


def test_null_inside_config_map_is_kept_as_value() -> None:
    ins = Instance.model_validate(
        {"uri": "x", "configuration": {"polls": {"max_options": 4, "min_expiration": None}}}
    )
    cfg = ins.get_config()
    assert cfg is not None
    assert cfg.polls == {"max_options": 4, "min_expiration": None}
    dumped = ins.model_dump(mode="json", by_alias=True, exclude_none=True)
    assert Instance.model_validate(dumped) == ins
