"""
Strata CLI package.

Provides the command-line interface with auto-discovery of commands from
``strata/cli/commands``. Each command module exposes ``SUMMARY``,
``register_args(parser)`` and ``main(args) -> int``.
"""
from ._output import OutputFormatter
from ._args import (
    add_json_flag,
    add_repo_root_flag,
    add_layer_flags,
    add_dry_run_flag,
    add_verbose_flag,
    add_standard_flags,
)
from ._utils import (
    CliContext,
    build_context,
    error_files,
    get_repo_root,
    load_pipeline,
    load_registry,
)

__all__ = [
    # Output formatting
    "OutputFormatter",
    # Argument helpers
    "add_json_flag",
    "add_repo_root_flag",
    "add_layer_flags",
    "add_dry_run_flag",
    "add_verbose_flag",
    "add_standard_flags",
    # Utilities
    "CliContext",
    "build_context",
    "error_files",
    "get_repo_root",
    "load_pipeline",
    "load_registry",
]
