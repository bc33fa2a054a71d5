"""Filesystem source discovery for composition.

Walks layer directories and yields ``(layer, identifier, text)`` triples for
the DocumentLoader.

Directory conventions:
- Base:            {base_dir}/{name}.md
- Extension:       {extension_dir}/{name}.md
- Local override:  {local_dir}/{name}.md

Identifiers preserve subdirectories and drop the suffix:
  <layer_dir>/agents/code-reviewer.md -> "agents/code-reviewer"
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from fnmatch import fnmatch
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Mapping, Optional, Sequence, Tuple

from strata.core.layers import Layer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LayerSource:
    """A discovered source file with layer info."""

    path: Path
    layer: Layer
    identifier: str


class SourceDiscovery:
    """Discover documents across the three layers.

    Args:
        layer_dirs: Layer → directories (low → high order within a layer)
        patterns: Filename globs to collect (default ``*.md``)
        exclude: fnmatch globs evaluated against the relative POSIX path
    """

    def __init__(
        self,
        layer_dirs: Mapping[Layer, Sequence[Path]],
        *,
        patterns: Sequence[str] = ("*.md",),
        exclude: Optional[Sequence[str]] = None,
    ) -> None:
        self.layer_dirs: Dict[Layer, List[Path]] = {
            layer: [Path(d) for d in layer_dirs.get(layer, ())] for layer in Layer.ordered()
        }
        self.patterns = list(patterns)
        self.exclude = list(exclude or [])

    def _identifier(self, base_dir: Path, file_path: Path) -> str:
        rel = file_path.relative_to(base_dir)
        return rel.with_suffix("").as_posix()

    def _is_excluded(self, base_dir: Path, file_path: Path) -> bool:
        if not self.exclude:
            return False
        rel = file_path.relative_to(base_dir).as_posix()
        return any(fnmatch(rel, pat) for pat in self.exclude)

    def _scan_dir(self, layer: Layer, base_dir: Path) -> List[LayerSource]:
        if not base_dir.is_dir():
            logger.debug("Skipping missing %s directory: %s", layer.name, base_dir)
            return []

        found: Dict[Path, LayerSource] = {}
        for pattern in self.patterns:
            for path in base_dir.rglob(pattern):
                if not path.is_file() or path in found:
                    continue
                if self._is_excluded(base_dir, path):
                    continue
                found[path] = LayerSource(
                    path=path,
                    layer=layer,
                    identifier=self._identifier(base_dir, path),
                )
        return sorted(found.values(), key=lambda s: s.path.relative_to(base_dir).as_posix())

    def discover(self) -> List[LayerSource]:
        """Return all sources in layer precedence, directory, then path order."""
        sources: List[LayerSource] = []
        for layer in Layer.ordered():
            for base_dir in self.layer_dirs[layer]:
                sources.extend(self._scan_dir(layer, base_dir))
        logger.debug("Discovered %d source file(s)", len(sources))
        return sources

    def iter_sources(self) -> Iterator[Tuple[Layer, str, str]]:
        """Yield ``(layer, identifier, text)`` triples for the loader."""
        for source in self.discover():
            yield source.layer, source.identifier, source.path.read_text(encoding="utf-8")

    def locate(self, identifier: str) -> Dict[Layer, List[Path]]:
        """Return the files defining ``identifier`` per layer."""
        located: Dict[Layer, List[Path]] = {}
        for source in self.discover():
            if source.identifier == identifier:
                located.setdefault(source.layer, []).append(source.path)
        return located


def layer_dirs_from_config(
    layers_cfg: Mapping[str, Iterable[str]],
    repo_root: Path,
) -> Dict[Layer, List[Path]]:
    """Build ``layer_dirs`` from the ``composition.layers`` config section.

    Relative paths are resolved against ``repo_root``.
    """
    dirs: Dict[Layer, List[Path]] = {}
    for raw_layer, raw_paths in (layers_cfg or {}).items():
        layer = Layer.parse(raw_layer)
        resolved: List[Path] = []
        for raw in raw_paths or []:
            p = Path(str(raw)).expanduser()
            resolved.append(p if p.is_absolute() else (repo_root / p))
        dirs[layer] = resolved
    return dirs


__all__ = ["LayerSource", "SourceDiscovery", "layer_dirs_from_config"]
