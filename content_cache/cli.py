"""content-cache CLI - inspect and scaffold cache configuration.

Usage:
    content-cache namespaces              Show the namespace/TTL table
    content-cache cascades                Show mutation cascades
    content-cache check-config PATH       Validate a config file
    content-cache init-config [--force]   Write the default config file
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from rich.console import Console
from rich.table import Table

from content_cache import __version__
from content_cache.config import (
    CONFIG_PATH,
    CacheConfig,
    load_config,
    load_config_strict,
    save_config,
)
from content_cache.errors import ContentCacheError
from content_cache.observability.logging import (
    configure_plain_logging,
    configure_structured_logging,
)
from content_cache.registry import DAY, HOUR, MINUTE, CascadeTable, NamespaceRegistry

console = Console()
logger = logging.getLogger(__name__)


def format_ttl(seconds: float) -> str:
    """Render a TTL with the largest whole unit, e.g. ``7d``, ``4h``, ``90s``."""
    for unit, size in (("d", DAY), ("h", HOUR), ("m", MINUTE)):
        if seconds >= size and seconds % size == 0:
            return f"{int(seconds // size)}{unit}"
    return f"{seconds:g}s"


def setup_logging(verbose: bool, config: CacheConfig) -> None:
    level = logging.DEBUG if verbose else getattr(logging, config.log.level)
    if config.log.structured:
        configure_structured_logging(level)
    else:
        configure_plain_logging(level)


def _tables(args: argparse.Namespace) -> tuple[NamespaceRegistry, CascadeTable]:
    config = load_config_strict(args.config) if args.config else load_config()
    registry = config.build_registry()
    return registry, config.build_cascades(registry)


def cmd_namespaces(args: argparse.Namespace) -> int:
    registry, cascades = _tables(args)

    table = Table(title="Cache Namespaces")
    table.add_column("Namespace", style="bold")
    table.add_column("TTL", justify="right")
    table.add_column("Invalidated by")

    for namespace, ttl in registry.items():
        kinds = [kind for kind, names in cascades.items() if namespace in names]
        table.add_row(namespace, format_ttl(ttl), ", ".join(kinds) or "-")

    console.print(table)
    return 0


def cmd_cascades(args: argparse.Namespace) -> int:
    _, cascades = _tables(args)

    table = Table(title="Mutation Cascades")
    table.add_column("Mutation", style="bold")
    table.add_column("Namespaces")

    for kind, namespaces in cascades.items():
        table.add_row(kind, ", ".join(namespaces))

    console.print(table)
    return 0


def cmd_check_config(args: argparse.Namespace) -> int:
    config = load_config_strict(args.path)
    registry = config.build_registry()
    cascades = config.build_cascades(registry)
    console.print(
        f"[green]OK[/green] {args.path}: {len(registry)} namespaces, "
        f"{len(cascades)} cascades, capacity {config.max_entries}"
    )
    return 0


def cmd_init_config(args: argparse.Namespace) -> int:
    path: Path = args.path
    if path.exists() and not args.force:
        console.print(f"[yellow]{path} already exists; use --force to overwrite[/yellow]")
        return 1
    if not save_config(CacheConfig(), path):
        console.print(f"[red]Could not write {path}[/red]")
        return 1
    console.print(f"Wrote default configuration to {path}")
    return 0


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="content-cache",
        description="Inspect and scaffold content cache configuration.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        default=None,
        help=f"Config file to read (default: {CONFIG_PATH})",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    p = subparsers.add_parser("namespaces", help="Show the namespace/TTL table")
    p.set_defaults(func=cmd_namespaces)

    p = subparsers.add_parser("cascades", help="Show mutation cascades")
    p.set_defaults(func=cmd_cascades)

    p = subparsers.add_parser("check-config", help="Validate a config file")
    p.add_argument("path", type=Path)
    p.set_defaults(func=cmd_check_config)

    p = subparsers.add_parser("init-config", help="Write the default config file")
    p.add_argument("--path", type=Path, default=CONFIG_PATH)
    p.add_argument("--force", action="store_true", help="Overwrite an existing file")
    p.set_defaults(func=cmd_init_config)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = create_parser()
    args = parser.parse_args(argv)

    setup_logging(args.verbose, load_config(args.config) if args.config else CacheConfig())

    try:
        return args.func(args)
    except ContentCacheError as e:
        logger.debug("Command failed", exc_info=True)
        console.print(f"[red]Error ({e.code}):[/red] {e.message}")
        return 1
    except KeyboardInterrupt:
        return 130


if __name__ == "__main__":
    sys.exit(main())
