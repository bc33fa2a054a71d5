"""Include directive scanning, graph construction and cycle detection.

Handles ``{include:identifier}`` directives inside document bodies. The
resolver only builds and validates the graph; substitution happens in the
composition engine.
"""
from __future__ import annotations

import logging
import re
from typing import Dict, Iterator, List, Mapping, Tuple

from .errors import CyclicIncludeError, UnresolvedIncludeError
from .types import Document, IncludeEdge, IncludeGraph

logger = logging.getLogger(__name__)

# Pattern for include directives: {include:identifier}
INCLUDE_PATTERN = re.compile(r"\{include:([^{}\n]+)\}")

_WHITE, _GRAY, _BLACK = 0, 1, 2


def line_of(document: Document, offset: int) -> int:
    """Raw-text line number of body position ``offset`` (1-based)."""
    return document.body.count("\n", 0, offset) + 1 + document.body_line_offset


def iter_include_tokens(body: str) -> Iterator[Tuple[re.Match[str], str]]:
    """Yield ``(match, target_identifier)`` for each directive in ``body``."""
    for match in INCLUDE_PATTERN.finditer(body):
        yield match, match.group(1).strip()


class IncludeResolver:
    """Build the include graph for an effective document set.

    Roots are traversed in lexicographic order and each node's targets in
    body order, so the reported cycle is the same on every run.
    """

    def scan(self, document: Document) -> List[IncludeEdge]:
        """Return the include edges of one document in body order."""
        edges: List[IncludeEdge] = []
        body = document.body
        for match, target in iter_include_tokens(body):
            line = line_of(document, match.start())
            edges.append(IncludeEdge(source=document.identifier, target=target, line=line))
        return edges

    def resolve(self, documents: Mapping[str, Document]) -> IncludeGraph:
        """Scan all documents and return a validated, acyclic graph.

        Raises:
            UnresolvedIncludeError: A directive names an identifier absent
                from ``documents``
            CyclicIncludeError: The graph contains a cycle
        """
        nodes = sorted(documents)
        edges: List[IncludeEdge] = []
        for identifier in nodes:
            for edge in self.scan(documents[identifier]):
                if edge.target not in documents:
                    raise UnresolvedIncludeError(edge.target, edge.source, edge.line)
                edges.append(edge)

        graph = IncludeGraph.build(nodes, edges)
        self._check_acyclic(graph)
        logger.debug("Include graph: %d node(s), %d edge(s)", len(graph.nodes), len(graph.edges))
        return graph

    def _check_acyclic(self, graph: IncludeGraph) -> None:
        """Three-colour DFS; a back edge to a GRAY node is a cycle."""
        color: Dict[str, int] = {n: _WHITE for n in graph.nodes}

        for root in graph.nodes:
            if color[root] != _WHITE:
                continue
            color[root] = _GRAY
            path: List[str] = [root]
            stack: List[Tuple[str, Iterator[str]]] = [(root, iter(graph.targets(root)))]

            while stack:
                node, pending = stack[-1]
                target = next(pending, None)
                if target is None:
                    color[node] = _BLACK
                    stack.pop()
                    path.pop()
                    continue

                state = color.get(target, _WHITE)
                if state == _GRAY:
                    raise CyclicIncludeError(path[path.index(target) :])
                if state == _WHITE:
                    color[target] = _GRAY
                    path.append(target)
                    stack.append((target, iter(graph.targets(target))))


__all__ = ["INCLUDE_PATTERN", "IncludeResolver", "iter_include_tokens", "line_of"]
