"""Command line entry point for StackLens."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from collections.abc import Sequence

from stacklens.constants import APP_TITLE
from stacklens.models.stacks.snapshot import StackSnapshot
from stacklens.models.state.app_settings import AppSettings
from stacklens.models.state.config_manager import ConfigLoadError, ConfigManager
from stacklens.services.discovery_service import StackDiscoveryService
from stacklens.services.selection import StackSelection

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str) -> None:
    """Send log records to stderr at the given level."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        stream=sys.stderr,
        force=True,
    )


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="stacklens",
        description=f"{APP_TITLE}: discover llm-d inference serving stacks",
    )
    parser.add_argument("--config", help="Settings file (YAML)")
    parser.add_argument(
        "--cluster",
        action="append",
        dest="clusters",
        metavar="CONTEXT",
        help="kubeconfig context to scan; repeat for several clusters",
    )
    parser.add_argument("--kubeconfig", help="kubeconfig file passed to kubectl")
    parser.add_argument(
        "--demo",
        action="store_true",
        help="Publish built-in demo stacks instead of querying clusters",
    )
    parser.add_argument("--log-level", help="Logging level (default from settings)")
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument(
        "--once",
        action="store_true",
        help="Run one discovery cycle and print the stacks as JSON (default)",
    )
    mode.add_argument(
        "--watch",
        action="store_true",
        help="Keep refreshing and print a line per published snapshot",
    )
    return parser


def load_settings(args: argparse.Namespace) -> AppSettings:
    """Load settings from file and apply command line overrides."""
    try:
        settings = ConfigManager.load(args.config)
    except ConfigLoadError as exc:
        logger.warning("Using default settings: %s", exc)
        settings = AppSettings()

    overrides: dict[str, object] = {}
    if args.clusters:
        overrides["clusters"] = args.clusters
    if args.kubeconfig:
        overrides["kubeconfig"] = args.kubeconfig
    if args.demo:
        overrides["demo_mode"] = True
    if args.log_level:
        overrides["log_level"] = args.log_level
    if not overrides:
        return settings
    return AppSettings.model_validate({**settings.model_dump(), **overrides})


def format_snapshot(snapshot: StackSnapshot) -> str:
    """One status line for a published snapshot."""
    if snapshot.is_loading and not snapshot.stacks:
        return "loading..."
    parts = [
        f"{stack.id} {stack.status.value} "
        f"{stack.ready_replicas}/{stack.total_replicas}"
        for stack in snapshot.stacks
    ]
    line = f"{len(snapshot.stacks)} stack(s)"
    if parts:
        line += ": " + ", ".join(parts)
    if snapshot.error:
        line += f" [error: {snapshot.error}]"
    return line


async def run_once(service: StackDiscoveryService) -> int:
    service.load_cache()
    await service.refresh(silent=bool(service.snapshot.stacks))
    snapshot = service.snapshot
    print(
        json.dumps(
            [stack.model_dump(mode="json") for stack in snapshot.stacks],
            indent=2,
        )
    )
    return 1 if snapshot.error else 0


async def run_watch(service: StackDiscoveryService, selection: StackSelection) -> int:
    subscription = service.subscribe()
    async with service:
        async for snapshot in subscription:
            selected = selection.reconcile(snapshot)
            line = format_snapshot(snapshot)
            if selected is not None:
                line += f" (selected: {selected.id})"
            print(line, flush=True)
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    args = create_parser().parse_args(argv)
    settings = load_settings(args)
    configure_logging(settings.log_level)

    if not settings.clusters and not settings.demo_mode:
        logger.warning("No clusters configured; use --cluster or the settings file")

    service = StackDiscoveryService.from_settings(settings)
    try:
        if args.watch:
            selection = StackSelection(settings.resolved_selection_path())
            return asyncio.run(run_watch(service, selection))
        return asyncio.run(run_once(service))
    except KeyboardInterrupt:
        return 130


if __name__ == "__main__":
    sys.exit(main())
