from __future__ import annotations

"""Print instance metadata for a Mastodon server.

Connection settings come from ``MASTODON_*`` environment variables (or a
``.env`` file); ``--server`` overrides the server URL.

Usage (with uv):

    uv run python script/instance_info.py --server https://mastodon.social
    uv run python script/instance_info.py --v2 --json
    uv run python script/instance_info.py --activity
    uv run python script/instance_info.py --peers
"""

import argparse
import json
import sys
from typing import Any, Sequence

from loguru import logger
from rich.console import Console
from rich.table import Table

from mastoclient.client import Client
from mastoclient.config import ClientConfig, get_config
from mastoclient.net.http import HttpCallError
from mastoclient.schemas.activity import WeeklyActivity
from mastoclient.schemas.instance import Instance, InstanceV2

console = Console()
log = logger.bind(module="script.instance_info")


def _configure_logging(config: ClientConfig) -> None:
    level = (config.log_level or "INFO").upper()
    logger.remove()
    logger.add(
        sys.stderr,
        level=level,
        backtrace=False,
        diagnose=False,
    )


def _build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Show public metadata of a Mastodon instance.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument("--server", default=None, help="Server base URL (overrides MASTODON_SERVER).")
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument("--v2", action="store_true", help="Query /api/v2/instance.")
    mode.add_argument("--activity", action="store_true", help="Query weekly activity.")
    mode.add_argument("--peers", action="store_true", help="Query known peer domains.")
    parser.add_argument("--json", action="store_true", help="Print raw JSON instead of a table.")
    return parser


def _instance_table(instance: Instance) -> Table:
    table = Table(title=instance.title or instance.uri, show_header=False)
    table.add_column("field", style="bold")
    table.add_column("value")
    table.add_row("uri", instance.uri)
    table.add_row("version", instance.version)
    table.add_row("email", instance.email)
    table.add_row("languages", ", ".join(instance.languages))
    if instance.stats is not None:
        table.add_row("users", str(instance.stats.user_count))
        table.add_row("statuses", str(instance.stats.status_count))
        table.add_row("domains", str(instance.stats.domain_count))
    if instance.contact_account is not None:
        table.add_row("contact", instance.contact_account.acct or instance.contact_account.username)
    for name, url in sorted(instance.urls.items()):
        table.add_row(f"urls.{name}", url)
    return table


def _instance_v2_table(instance: InstanceV2) -> Table:
    table = Table(title=instance.title or instance.domain, show_header=False)
    table.add_column("field", style="bold")
    table.add_column("value")
    table.add_row("domain", instance.domain)
    table.add_row("version", instance.version)
    table.add_row("source", instance.source_url)
    table.add_row("active users (month)", str(instance.usage.users.active_month))
    table.add_row("languages", ", ".join(instance.languages))
    table.add_row("registrations", "open" if instance.registrations.enabled else "closed")
    table.add_row("contact", instance.contact.email)
    for rule in instance.rules:
        table.add_row(f"rule {rule.id}", rule.text)
    return table


def _activity_table(activity: list[WeeklyActivity]) -> Table:
    table = Table(title="Weekly activity")
    table.add_column("week")
    table.add_column("statuses", justify="right")
    table.add_column("logins", justify="right")
    table.add_column("registrations", justify="right")
    for bucket in activity:
        table.add_row(
            bucket.week.date().isoformat(),
            str(bucket.statuses),
            str(bucket.logins),
            str(bucket.registrations),
        )
    return table


def _dump(value: Any) -> Any:
    if isinstance(value, list):
        return [_dump(item) for item in value]
    if hasattr(value, "model_dump"):
        return value.model_dump(mode="json", by_alias=True, exclude_none=True)
    return value


def main(argv: Sequence[str] | None = None) -> int:
    args = _build_arg_parser().parse_args(list(argv) if argv is not None else None)

    config = get_config()
    if args.server:
        config = config.model_copy(update={"server": args.server})
    _configure_logging(config)

    try:
        with Client(config) as client:
            if args.v2:
                result: Any = client.get_instance_v2()
            elif args.activity:
                result = client.get_instance_activity()
            elif args.peers:
                result = client.get_instance_peers()
            else:
                result = client.get_instance()
    except ValueError as exc:
        console.log(f"[bold red]Invalid configuration[/] {exc}")
        return 1
    except HttpCallError as exc:
        log.error("Request to {} failed: {}", config.server, exc)
        console.log(f"[bold red]Request failed[/] {exc}")
        return 1

    if args.json:
        console.print_json(json.dumps(_dump(result)))
    elif isinstance(result, Instance):
        console.print(_instance_table(result))
    elif isinstance(result, InstanceV2):
        console.print(_instance_v2_table(result))
    elif args.activity:
        console.print(_activity_table(result))
    else:
        for domain in result:
            console.print(domain)
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
