"""Shared helpers: atomic file I/O, dictionary merging and path resolution."""
from __future__ import annotations

from .io import (
    atomic_write,
    ensure_directory,
    iter_yaml_files,
    read_yaml,
    write_json_atomic,
    write_text,
)
from .merge import deep_merge, merge_arrays
from .paths import StrataPathError, get_project_config_dir, resolve_project_root

__all__ = [
    "atomic_write",
    "ensure_directory",
    "iter_yaml_files",
    "read_yaml",
    "write_json_atomic",
    "write_text",
    "deep_merge",
    "merge_arrays",
    "StrataPathError",
    "get_project_config_dir",
    "resolve_project_root",
]
