"""
Strata explain command.

SUMMARY: Explain layer resolution and includes for one identifier
"""

from __future__ import annotations

import argparse
from typing import Any, Dict, List

from strata.cli import OutputFormatter, add_standard_flags, build_context, error_files, load_registry
from strata.cli._utils import CliContext
from strata.core.composition import EmptyRootError, IncludeResolver, OverrideMerger
from strata.core.composition.types import thaw_metadata
from strata.core.exceptions import StrataError

SUMMARY = "Explain layer resolution and includes for one identifier"


def register_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("identifier", help="Document identifier (e.g. agents/code-reviewer)")
    add_standard_flags(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=args.json)
    ctx: CliContext | None = None

    try:
        ctx = build_context(args)
        registry = load_registry(ctx)
        by_layer = registry.get(args.identifier)
        if not by_layer:
            raise EmptyRootError(args.identifier)

        located = ctx.discovery.locate(args.identifier)
        layers: List[Dict[str, Any]] = []
        for idx, layer in enumerate(OverrideMerger.explain(by_layer)):
            paths = located.get(layer) or []
            layers.append(
                {
                    "layer": layer.name,
                    "applied": idx == 0,
                    "path": str(paths[-1]) if paths else None,
                }
            )

        winner = by_layer[OverrideMerger.explain(by_layer)[0]]
        includes = [
            {"target": e.target, "line": e.line, "known": e.target in registry}
            for e in IncludeResolver().scan(winner)
        ]
    except StrataError as err:
        formatter.strata_error(err, error_files(err, ctx))
        return 1

    payload = {
        "identifier": args.identifier,
        "layers": layers,
        "metadata": thaw_metadata(winner.metadata),
        "includes": includes,
    }
    if args.json:
        formatter.json_output(payload)
        return 0

    formatter.text(args.identifier)
    for item in layers:
        status = "applied" if item["applied"] else "shadowed"
        formatter.text(f"- {item['layer']} ({status}): {item['path'] or '<in-memory>'}")
    if includes:
        formatter.text("includes:")
        for inc in includes:
            suffix = "" if inc["known"] else "  [missing]"
            formatter.text(f"  line {inc['line']}: {inc['target']}{suffix}")
    return 0
