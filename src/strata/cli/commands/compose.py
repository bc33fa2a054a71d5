"""
Strata compose command.

SUMMARY: Compose root documents with includes expanded and overrides applied
"""

from __future__ import annotations

import argparse

from strata.cli import (
    OutputFormatter,
    add_dry_run_flag,
    add_standard_flags,
    build_context,
    error_files,
    load_pipeline,
)
from strata.cli._utils import CliContext
from strata.core.composition import CompositionEngine, CompositionWriter
from strata.core.composition.output import render_document
from strata.core.exceptions import StrataError

SUMMARY = "Compose root documents with includes expanded and overrides applied"


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    parser.add_argument("roots", nargs="*", metavar="ROOT", help="Root document identifiers")
    parser.add_argument(
        "--all",
        action="store_true",
        help="Compose every known identifier",
    )
    parser.add_argument(
        "--out",
        type=str,
        help="Output directory (default: output.dir from config)",
    )
    add_dry_run_flag(parser)
    add_standard_flags(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=args.json)
    ctx: CliContext | None = None

    try:
        ctx = build_context(args)
        _, merged, graph = load_pipeline(ctx)

        roots = sorted(merged) if args.all else list(args.roots)
        if not roots:
            formatter.error(ValueError("no roots"), "No root identifiers given (pass ROOT... or --all)")
            return 1

        resolved = CompositionEngine(max_depth=ctx.max_depth).compose(roots, merged, graph)

        if args.dry_run:
            if args.json:
                formatter.json_output({"success": True, "documents": [d.to_dict() for d in resolved]})
            else:
                for doc in resolved:
                    formatter.text(f"=== {doc.identifier} ({doc.layer.name}) ===")
                    formatter.text(render_document(doc))
            return 0

        out_dir = ctx.output_dir(args.out)
        written = CompositionWriter(out_dir, manifest=ctx.write_manifest).write(resolved)
        formatter.success(
            {
                "out_dir": str(out_dir),
                "documents": [
                    {"identifier": d.identifier, "path": str(p), "contributors": list(d.contributors)}
                    for d, p in zip(resolved, written)
                ],
            },
            f"✓ Composed {len(written)} document(s) into {out_dir}",
        )
        return 0

    except StrataError as err:
        formatter.strata_error(err, error_files(err, ctx))
        return 1
    except (OSError, ValueError) as err:
        formatter.error(err, f"Failed to write composed output: {err}", error_code="compose_error")
        return 1
