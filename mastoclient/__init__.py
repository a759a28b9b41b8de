"""Client for the instance metadata endpoints of a Mastodon server."""

from __future__ import annotations

from mastoclient.client import Client
from mastoclient.config import ClientConfig, get_config
from mastoclient.net.http import APIError, DecodeError, HttpCallError, TransportError
from mastoclient.schemas.account import Account
from mastoclient.schemas.activity import WeeklyActivity
from mastoclient.schemas.instance import Instance, InstanceConfig, InstanceStats, InstanceV2, Rule

__all__ = [
    "APIError",
    "Account",
    "Client",
    "ClientConfig",
    "DecodeError",
    "HttpCallError",
    "Instance",
    "InstanceConfig",
    "InstanceStats",
    "InstanceV2",
    "Rule",
    "TransportError",
    "WeeklyActivity",
    "get_config",
]
