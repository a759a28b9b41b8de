"""Read-only client for the Mastodon instance metadata endpoints.

HTTP concerns (base URL, bearer token, timeouts, status handling) live in
`mastoclient.net.http`; this module only picks the path and the shape each
endpoint decodes into.
"""

from __future__ import annotations

from functools import lru_cache
from typing import TYPE_CHECKING, Any, TypeVar

from loguru import logger
from pydantic import TypeAdapter, ValidationError

from mastoclient.config import ClientConfig, get_config
from mastoclient.net.http import DecodeError, HttpClient, decode_json
from mastoclient.schemas.activity import WeeklyActivity
from mastoclient.schemas.instance import Instance, InstanceV2

if TYPE_CHECKING:
    import httpx

__all__ = ["Client"]

log = logger.bind(module="client")

T = TypeVar("T")


@lru_cache(maxsize=None)
def _adapter(target: Any) -> TypeAdapter[Any]:
    return TypeAdapter(target)


class Client:
    """Synchronous client for one Mastodon server.

    The client keeps no per-call state; every method performs exactly one GET
    and either returns the decoded payload or raises the `HttpCallError`
    subclass describing what went wrong.
    """

    def __init__(
        self,
        config: ClientConfig | None = None,
        *,
        transport: "httpx.BaseTransport | None" = None,
        reuse_connections: bool = False,
    ) -> None:
        self.config = config if config is not None else get_config()
        server = (self.config.server or "").strip()
        if not server:
            raise ValueError("Invalid server URL: value is empty.")
        self.server = server.rstrip("/")
        self._http = HttpClient(
            base_url=self.server,
            timeout_seconds=self.config.timeout_seconds,
            user_agent=self.config.user_agent,
            access_token=self.config.access_token,
            transport=transport,
            reuse_connections=bool(reuse_connections),
        )

    def close(self) -> None:
        """Close any underlying persistent HTTP resources."""
        self._http.close()

    def __enter__(self) -> "Client":
        self._http.open()
        return self

    def __exit__(self, exc_type: object, exc: object, tb: object) -> None:
        self.close()

    def _do_api(
        self,
        path: str,
        target: type[T] | Any,
        *,
        timeout_seconds: float | None = None,
    ) -> T:
        """GET `path` and validate the JSON payload into `target`."""
        response = self._http.request(
            "GET",
            path,
            headers={"Accept": "application/json"},
            timeout_seconds=timeout_seconds,
        )
        payload = decode_json(response)
        try:
            return _adapter(target).validate_python(payload)
        except ValidationError as exc:
            log.warning("Unexpected payload from {}: {} error(s)", path, exc.error_count())
            raise DecodeError(
                f"Invalid response from {path}: {exc}",
                status_code=int(response.status_code),
            ) from exc

    def get_instance(self, *, timeout_seconds: float | None = None) -> Instance:
        """Return the server's v1 instance information."""
        return self._do_api("/api/v1/instance", Instance, timeout_seconds=timeout_seconds)

    def get_instance_v2(self, *, timeout_seconds: float | None = None) -> InstanceV2:
        """Return the server's v2 instance information."""
        return self._do_api("/api/v2/instance", InstanceV2, timeout_seconds=timeout_seconds)

    def get_instance_activity(
        self, *, timeout_seconds: float | None = None
    ) -> list[WeeklyActivity]:
        """Return weekly activity buckets in the order the server sent them."""
        return self._do_api(
            "/api/v1/instance/activity",
            list[WeeklyActivity],
            timeout_seconds=timeout_seconds,
        )

    def get_instance_peers(self, *, timeout_seconds: float | None = None) -> list[str]:
        """Return the domains this server federates with, in server order."""
        return self._do_api(
            "/api/v1/instance/peers",
            list[str],
            timeout_seconds=timeout_seconds,
        )
