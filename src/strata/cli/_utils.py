"""Shared CLI utilities: repo root, config loading and the composition pipeline."""
from __future__ import annotations

import argparse
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from strata.core.composition import (
    DocumentLoader,
    DocumentRegistry,
    IncludeGraph,
    IncludeResolver,
    OverrideMerger,
    SourceDiscovery,
    layer_dirs_from_config,
)
from strata.core.composition.types import Document
from strata.core.config import ConfigManager
from strata.core.exceptions import StrataError
from strata.core.layers import Layer
from strata.core.stdlib_logging import configure_logging
from strata.core.utils.paths import resolve_project_root

logger = logging.getLogger(__name__)

# CLI flag → config layer key
_LAYER_FLAGS = (("base", "base"), ("extension", "extension"), ("local", "local_override"))


def get_repo_root(args: argparse.Namespace) -> Path:
    """Resolve the repository root from --repo-root or the environment."""
    raw = getattr(args, "repo_root", None)
    if raw:
        return Path(raw).expanduser().resolve()
    return resolve_project_root()


@dataclass
class CliContext:
    """Everything a command needs to run the pipeline."""

    repo_root: Path
    config: Dict[str, Any]
    discovery: SourceDiscovery

    @property
    def composition_cfg(self) -> Dict[str, Any]:
        return self.config.get("composition") or {}

    @property
    def duplicates(self) -> str:
        return str(self.composition_cfg.get("duplicates", "error"))

    @property
    def max_depth(self) -> int:
        return int(self.composition_cfg.get("max_depth", 64))

    def output_dir(self, override: Optional[str] = None) -> Path:
        raw = override or (self.config.get("output") or {}).get("dir") or ".strata/_generated"
        p = Path(raw).expanduser()
        return p if p.is_absolute() else self.repo_root / p

    @property
    def write_manifest(self) -> bool:
        return bool((self.config.get("output") or {}).get("manifest", True))


def build_context(args: argparse.Namespace) -> CliContext:
    """Load config, apply CLI layer overrides and configure logging."""
    repo_root = get_repo_root(args)
    config = ConfigManager(repo_root).load_config()

    log_cfg = config.get("logging") or {}
    level = "DEBUG" if getattr(args, "verbose", False) else str(log_cfg.get("level") or "WARNING")
    log_file = log_cfg.get("file")
    configure_logging(
        level,
        log_file=(repo_root / log_file) if log_file else None,
        json_mode=bool(getattr(args, "json", False)),
    )

    comp = config.get("composition") or {}
    layers_cfg: Dict[str, List[str]] = dict(comp.get("layers") or {})
    for flag, key in _LAYER_FLAGS:
        dirs = getattr(args, flag, None)
        if dirs:
            layers_cfg[key] = list(dirs)

    discovery = SourceDiscovery(
        layer_dirs_from_config(layers_cfg, repo_root),
        patterns=comp.get("patterns") or ["*.md"],
        exclude=comp.get("exclude") or [],
    )
    logger.debug("Repository root: %s", repo_root)
    return CliContext(repo_root=repo_root, config=config, discovery=discovery)


def load_registry(ctx: CliContext) -> DocumentRegistry:
    return DocumentLoader(duplicates=ctx.duplicates).load(ctx.discovery.iter_sources())


def load_pipeline(ctx: CliContext) -> Tuple[DocumentRegistry, Dict[str, Document], IncludeGraph]:
    """Run load → merge → resolve and return all three stages."""
    registry = load_registry(ctx)
    merged = OverrideMerger().merge(registry)
    graph = IncludeResolver().resolve(merged)
    return registry, merged, graph


def error_files(err: StrataError, ctx: Optional[CliContext]) -> Dict[str, Any]:
    """Map identifiers named by ``err`` to the files that define them.

    The core only knows logical identifiers; operators need paths.
    """
    if ctx is None:
        return {}
    names: List[str] = []
    for key in ("identifier", "referenced_by"):
        value = err.context.get(key)
        if isinstance(value, str):
            names.append(value)
    for value in err.context.get("cycle") or []:
        names.append(str(value))

    files: Dict[str, List[str]] = {}
    layer = err.context.get("layer")
    for name in dict.fromkeys(names):
        located = ctx.discovery.locate(name)
        paths = [
            str(p)
            for l, ps in sorted(located.items(), key=lambda kv: kv[0].precedence, reverse=True)
            if layer is None or l is Layer.parse(layer)
            for p in ps
        ]
        if paths:
            files[name] = paths
    return {"files": files} if files else {}


__all__ = [
    "CliContext",
    "build_context",
    "error_files",
    "get_repo_root",
    "load_pipeline",
    "load_registry",
]
