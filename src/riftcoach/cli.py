# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import asyncio
import contextlib
import json
from pathlib import Path

import click

from riftcoach.logging import configure_logging
from riftcoach.settings import Settings


def _settings(**overrides) -> Settings:
    settings = Settings()
    ctx = click.get_current_context(silent=True)
    log_format = ctx.find_root().params.get("log_format") if ctx is not None else None
    if log_format is not None:
        settings = settings.model_copy(update={"log_format": log_format})
    for section, values in overrides.items():
        current = getattr(settings, section)
        settings = settings.model_copy(update={section: current.model_copy(update=values)})
    configure_logging(settings)
    return settings


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.option(
    "--log-format",
    type=click.Choice(["console", "json"]),
    default=None,
    help="Log renderer on stderr (default from RIFTCOACH_LOG_FORMAT).",
)
def cli(log_format: str | None) -> None:
    """riftcoach command line interface."""


@cli.command("run")
@click.option("--interval-ms", type=int, default=None, help="Poll interval in milliseconds (250-10000).")
@click.option("--rules-dir", type=click.Path(file_okay=False, path_type=Path), default=None)
@click.option("--watch-socket/--no-watch-socket", default=None, help="Broadcast snapshots and tips over TCP.")
def run(interval_ms: int | None, rules_dir: Path | None, watch_socket: bool | None) -> None:
    """Poll the live client and print tips as they fire."""
    from riftcoach.app import RiftCoachApp

    overrides: dict[str, dict] = {}
    if rules_dir is not None:
        overrides["tips"] = {"rules_dir": rules_dir}
    if watch_socket is not None:
        overrides["watch"] = {"enabled": watch_socket}
    settings = _settings(**overrides)
    if interval_ms is not None:
        settings = settings.model_copy(update={"poll_interval_ms": interval_ms})

    async def _run() -> None:
        app = RiftCoachApp(settings)

        def _print_tip(tip) -> None:
            click.echo(f"[{tip.severity}] {tip.title}" + (f" - {tip.body}" if tip.body else ""))

        app.hub.subscribe("tip", _print_tip)
        await app.run()

    with contextlib.suppress(KeyboardInterrupt):
        asyncio.run(_run())


@cli.command("snapshot")
def snapshot() -> None:
    """Aggregate one snapshot and print it as JSON."""
    from riftcoach.app import RiftCoachApp

    settings = _settings()

    async def _run() -> str:
        app = RiftCoachApp(settings)
        try:
            result = await app.poller.poll_once()
        finally:
            await app.close()
        return result.model_dump_json(indent=2)

    click.echo(asyncio.run(_run()))


@cli.command("raw")
def raw() -> None:
    """Dump every live client endpoint as JSON for diagnostics."""
    from riftcoach.app import RiftCoachApp

    settings = _settings(assets={"enabled": False})

    async def _run() -> dict:
        app = RiftCoachApp(settings)
        try:
            return await app.aggregator.raw_dump()
        finally:
            await app.close()

    click.echo(json.dumps(asyncio.run(_run()), indent=2, default=str))


@cli.group("rules")
def rules() -> None:
    """Tip rule documents."""


@rules.command("check")
@click.argument("directory", required=False, type=click.Path(file_okay=False, path_type=Path))
def rules_check(directory: Path | None) -> None:
    """Validate the rule documents in DIRECTORY (default: configured rules dir)."""
    from riftcoach.tips import load_rule_documents

    settings = _settings()
    target = directory or settings.tips.rules_dir
    result = load_rule_documents(target)

    click.echo(f"{target}: {len(result.documents)} documents")
    for module in result.rule_set.modules:
        state = "" if module.enabled else " (disabled)"
        click.echo(f"  {module.id}{state}: {len(module.rules)} rules")
        for rule in module.rules:
            click.echo(f"    - {rule.id} [{rule.trigger.type}]")
    for error in result.errors:
        click.echo(f"error: {error}", err=True)
    if result.errors:
        raise SystemExit(1)


def main() -> None:
    cli.main()


if __name__ == "__main__":
    main()
