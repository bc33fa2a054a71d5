"""Common CLI argument registration utilities."""
from __future__ import annotations

import argparse


def add_json_flag(parser: argparse.ArgumentParser) -> None:
    """Add --json flag for JSON output mode."""
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output as JSON",
    )


def add_repo_root_flag(parser: argparse.ArgumentParser) -> None:
    """Add --repo-root flag for repository root override."""
    parser.add_argument(
        "--repo-root",
        type=str,
        help="Override repository root path",
    )


def add_layer_flags(parser: argparse.ArgumentParser) -> None:
    """Add repeatable --base/--extension/--local directory overrides.

    When given, a flag replaces the configured directories for its layer.
    """
    group = parser.add_argument_group("layers")
    group.add_argument(
        "--base",
        action="append",
        metavar="DIR",
        help="BASE layer directory (repeatable)",
    )
    group.add_argument(
        "--extension",
        action="append",
        metavar="DIR",
        help="EXTENSION layer directory (repeatable)",
    )
    group.add_argument(
        "--local",
        action="append",
        metavar="DIR",
        help="LOCAL_OVERRIDE layer directory (repeatable)",
    )


def add_dry_run_flag(parser: argparse.ArgumentParser) -> None:
    """Add --dry-run flag."""
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print results instead of writing files",
    )


def add_verbose_flag(parser: argparse.ArgumentParser) -> None:
    """Add --verbose flag (DEBUG logging)."""
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logging",
    )


def add_standard_flags(parser: argparse.ArgumentParser) -> None:
    """Add --json, --repo-root, --verbose and the layer directory flags."""
    add_json_flag(parser)
    add_repo_root_flag(parser)
    add_verbose_flag(parser)
    add_layer_flags(parser)


__all__ = [
    "add_json_flag",
    "add_repo_root_flag",
    "add_layer_flags",
    "add_dry_run_flag",
    "add_verbose_flag",
    "add_standard_flags",
]
