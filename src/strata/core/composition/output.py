"""File writer for composed output.

Writes each ResolvedDocument to ``<out_dir>/<identifier>.md`` and records a
``manifest.json`` entry per artifact for traceability.
"""
from __future__ import annotations

import hashlib
import logging
from pathlib import Path, PurePosixPath
from typing import Any, Dict, List, Mapping, Sequence

import yaml

from strata import __version__
from strata.core.utils.io import ensure_directory, write_json_atomic, write_text

from .types import ResolvedDocument, thaw_metadata

logger = logging.getLogger(__name__)

MANIFEST_NAME = "manifest.json"


def format_frontmatter(data: Mapping[str, Any]) -> str:
    """Format metadata as a ``---`` delimited YAML block.

    Example:
        >>> print(format_frontmatter({'name': 'reviewer'}))
        ---
        name: reviewer
        ---
        <BLANKLINE>
    """
    yaml_content = yaml.safe_dump(
        thaw_metadata(data),
        default_flow_style=False,
        allow_unicode=True,
        sort_keys=False,
    )
    return f"---\n{yaml_content}---\n"


def render_document(resolved: ResolvedDocument) -> str:
    """Return the on-disk text for one resolved document."""
    if resolved.metadata:
        return format_frontmatter(resolved.metadata) + resolved.body
    return resolved.body


class CompositionWriter:
    """Write resolved documents under ``out_dir``."""

    def __init__(self, out_dir: Path, *, manifest: bool = True) -> None:
        self.out_dir = Path(out_dir)
        self.manifest = manifest

    def path_for(self, identifier: str) -> Path:
        """Output path for ``identifier``.

        Raises:
            ValueError: If the identifier would escape ``out_dir``
        """
        rel = PurePosixPath(identifier)
        if rel.is_absolute() or ".." in rel.parts or not rel.parts:
            raise ValueError(f"Identifier cannot be written inside output dir: {identifier!r}")
        return self.out_dir.joinpath(*rel.parts).with_name(rel.name + ".md")

    def write(self, documents: Sequence[ResolvedDocument]) -> List[Path]:
        """Write every document (and the manifest); return written paths."""
        targets = [(doc, self.path_for(doc.identifier)) for doc in documents]
        ensure_directory(self.out_dir)

        written: List[Path] = []
        entries: Dict[str, Dict[str, Any]] = {}
        for doc, path in targets:
            text = render_document(doc)
            write_text(path, text)
            written.append(path)
            entries[doc.identifier] = {
                "path": path.relative_to(self.out_dir).as_posix(),
                "layer": doc.layer.name,
                "contributors": list(doc.contributors),
                "sha256": hashlib.sha256(text.encode("utf-8")).hexdigest(),
            }
            logger.debug("Wrote %s", path)

        if self.manifest:
            write_json_atomic(self.manifest_path, {"engineVersion": __version__, "documents": entries})
        logger.info("Wrote %d composed document(s) to %s", len(written), self.out_dir)
        return written

    @property
    def manifest_path(self) -> Path:
        return self.out_dir / MANIFEST_NAME


__all__ = ["CompositionWriter", "format_frontmatter", "render_document", "MANIFEST_NAME"]
