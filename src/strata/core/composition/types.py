"""Value types shared by the composition pipeline."""
from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from strata.core.layers import Layer

MetadataValue = Union[str, int, float, bool, List[str], Tuple[str, ...]]
Metadata = Mapping[str, MetadataValue]


def _freeze(metadata: Optional[Mapping[str, Any]]) -> Optional[Mapping[str, Any]]:
    if metadata is None:
        return None
    frozen = {k: (tuple(v) if isinstance(v, (list, tuple)) else v) for k, v in metadata.items()}
    return MappingProxyType(frozen)


def thaw_metadata(metadata: Optional[Metadata]) -> Optional[Dict[str, Any]]:
    """Plain ``dict`` copy of frozen metadata with list values, for JSON and YAML."""
    if metadata is None:
        return None
    return {k: (list(v) if isinstance(v, tuple) else v) for k, v in metadata.items()}


@dataclass(frozen=True)
class Document:
    """One source document after front matter parsing.

    ``body_line_offset`` is the number of raw lines that precede the body, so
    a body line ``n`` is raw line ``n + body_line_offset``.
    """

    identifier: str
    layer: Layer
    raw_text: str
    body: str
    metadata: Optional[Metadata] = None
    body_line_offset: int = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "metadata", _freeze(self.metadata))


@dataclass(frozen=True)
class IncludeEdge:
    """Directed include reference ``source`` → ``target`` found at ``line``."""

    source: str
    target: str
    line: int


@dataclass(frozen=True)
class IncludeGraph:
    """Include dependency graph over one effective document set."""

    nodes: Tuple[str, ...]
    edges: Tuple[IncludeEdge, ...]
    _adjacency: Mapping[str, Tuple[IncludeEdge, ...]] = field(
        default_factory=dict, repr=False, compare=False
    )

    @classmethod
    def build(cls, nodes: List[str], edges: List[IncludeEdge]) -> "IncludeGraph":
        adjacency: Dict[str, List[IncludeEdge]] = {n: [] for n in nodes}
        for edge in edges:
            adjacency.setdefault(edge.source, []).append(edge)
        return cls(
            nodes=tuple(sorted(nodes)),
            edges=tuple(edges),
            _adjacency=MappingProxyType({k: tuple(v) for k, v in adjacency.items()}),
        )

    def __contains__(self, identifier: object) -> bool:
        return identifier in self._adjacency

    def edges_from(self, identifier: str) -> Tuple[IncludeEdge, ...]:
        """Outgoing edges of ``identifier`` in body order."""
        return self._adjacency.get(identifier, ())

    def targets(self, identifier: str) -> List[str]:
        """Include targets of ``identifier`` in body order (duplicates kept)."""
        return [e.target for e in self.edges_from(identifier)]


@dataclass(frozen=True)
class ResolvedDocument:
    """Effective, fully expanded text for one root identifier."""

    identifier: str
    layer: Layer
    body: str
    contributors: Tuple[str, ...]
    metadata: Optional[Metadata] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "metadata", _freeze(self.metadata))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "identifier": self.identifier,
            "layer": self.layer.name,
            "metadata": thaw_metadata(self.metadata),
            "body": self.body,
            "contributors": list(self.contributors),
        }


__all__ = [
    "Metadata",
    "MetadataValue",
    "Document",
    "IncludeEdge",
    "IncludeGraph",
    "ResolvedDocument",
    "thaw_metadata",
]
