"""
Strata validate command.

SUMMARY: Check every document for front matter, include and cycle errors
"""

from __future__ import annotations

import argparse

from strata.cli import OutputFormatter, add_standard_flags, build_context, error_files, load_pipeline
from strata.cli._utils import CliContext
from strata.core.exceptions import StrataError

SUMMARY = "Check every document for front matter, include and cycle errors"


def register_args(parser: argparse.ArgumentParser) -> None:
    add_standard_flags(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=args.json)
    ctx: CliContext | None = None

    try:
        ctx = build_context(args)
        registry, merged, graph = load_pipeline(ctx)
    except StrataError as err:
        formatter.strata_error(err, error_files(err, ctx))
        return 1

    shadowed = sum(1 for layers in registry.values() if len(layers) > 1)
    formatter.success(
        {
            "valid": True,
            "documents": len(merged),
            "includes": len(graph.edges),
            "overridden": shadowed,
        },
        f"✓ {len(merged)} document(s), {len(graph.edges)} include(s), {shadowed} override(s): valid",
    )
    return 0
