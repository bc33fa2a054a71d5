"""
Strata graph command.

SUMMARY: Print the include graph of the effective document set
"""

from __future__ import annotations

import argparse

from strata.cli import OutputFormatter, add_standard_flags, build_context, error_files, load_pipeline
from strata.cli._utils import CliContext
from strata.core.exceptions import StrataError

SUMMARY = "Print the include graph of the effective document set"


def register_args(parser: argparse.ArgumentParser) -> None:
    add_standard_flags(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=args.json)
    ctx: CliContext | None = None

    try:
        ctx = build_context(args)
        _, _, graph = load_pipeline(ctx)
    except StrataError as err:
        formatter.strata_error(err, error_files(err, ctx))
        return 1

    if args.json:
        formatter.json_output(
            {
                "nodes": list(graph.nodes),
                "edges": [{"source": e.source, "target": e.target, "line": e.line} for e in graph.edges],
            }
        )
        return 0

    for edge in graph.edges:
        formatter.text(f"{edge.source} -> {edge.target} (line {edge.line})")
    isolated = [n for n in graph.nodes if not graph.edges_from(n)]
    if not graph.edges:
        formatter.text("(no includes)")
    elif isolated:
        formatter.text(f"{len(isolated)} document(s) without includes")
    return 0
