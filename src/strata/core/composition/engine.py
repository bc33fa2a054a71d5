"""Composition engine: render root documents with includes expanded.

Pipeline driven by :func:`compose_sources`:

1. LOAD     - DocumentLoader parses (layer, identifier, text) triples
2. MERGE    - OverrideMerger picks one document per identifier
3. RESOLVE  - IncludeResolver builds and validates the include graph
4. COMPOSE  - CompositionEngine expands includes for each root

Each root is walked depth-first, pre-order. An included document is emitted
once per root: later references to it expand to nothing. Only the root's front
matter reaches the caller.

Any error aborts the whole call; no partial output is returned.
"""
from __future__ import annotations

import logging
import re
from enum import Enum
from typing import Dict, Iterable, Iterator, List, Mapping, Sequence

from .errors import CyclicIncludeError, EmptyRootError, IncludeDepthError, UnresolvedIncludeError
from .includes import INCLUDE_PATTERN, IncludeResolver, line_of
from .loader import DocumentLoader, Source
from .merger import OverrideMerger
from .types import Document, IncludeGraph, ResolvedDocument

logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 64


class VisitState(Enum):
    """Per-root walk state of one identifier."""

    UNVISITED = "unvisited"
    IN_PROGRESS = "in_progress"
    EMITTED = "emitted"


class _Frame:
    """One open document on the expansion stack."""

    __slots__ = ("document", "pending", "parts", "pos")

    def __init__(self, document: Document, pending: Iterator[re.Match[str]]) -> None:
        self.document = document
        self.pending = pending
        self.parts: List[str] = []
        self.pos = 0


class CompositionEngine:
    """Expand include directives for a list of root identifiers.

    Usage:
        engine = CompositionEngine(max_depth=32)
        resolved = engine.compose(["agents/reviewer"], merged, graph)
    """

    def __init__(self, *, max_depth: int = DEFAULT_MAX_DEPTH) -> None:
        if max_depth < 0:
            raise ValueError("max_depth must be >= 0")
        self.max_depth = max_depth

    def compose(
        self,
        root_identifiers: Sequence[str],
        merged: Mapping[str, Document],
        graph: IncludeGraph,
    ) -> List[ResolvedDocument]:
        """Compose every root, in the order given.

        Raises:
            EmptyRootError: A root has no document
            UnresolvedIncludeError: A directive targets an identifier missing
                from ``merged`` or ``graph``
            CyclicIncludeError: An identifier is re-entered while in progress
            IncludeDepthError: Nesting exceeds ``max_depth``
        """
        for root in root_identifiers:
            if not str(root).strip() or root not in merged:
                raise EmptyRootError(str(root))

        results: List[ResolvedDocument] = []
        for root in root_identifiers:
            results.append(self._compose_root(root, merged, graph))

        logger.info("Composed %d root document(s)", len(results))
        return results

    def _compose_root(
        self,
        root: str,
        merged: Mapping[str, Document],
        graph: IncludeGraph,
    ) -> ResolvedDocument:
        states: Dict[str, VisitState] = {}
        contributors: List[str] = []
        body = self._expand(root, merged, graph, states, contributors)
        document = merged[root]
        logger.debug("%s: contributors %s", root, ", ".join(contributors))
        return ResolvedDocument(
            identifier=root,
            layer=document.layer,
            body=body,
            contributors=tuple(contributors),
            metadata=document.metadata,
        )

    def _expand(
        self,
        root: str,
        merged: Mapping[str, Document],
        graph: IncludeGraph,
        states: Dict[str, VisitState],
        contributors: List[str],
    ) -> str:
        """Expand ``root`` with an explicit stack of open documents.

        The stack doubles as the include chain: ``stack[0]`` is the root at
        depth 0 and ``stack[-1]`` is the document currently being scanned.
        """

        def enter(identifier: str) -> _Frame:
            states[identifier] = VisitState.IN_PROGRESS
            contributors.append(identifier)
            document = merged[identifier]
            return _Frame(document, INCLUDE_PATTERN.finditer(document.body))

        stack: List[_Frame] = [enter(root)]
        while True:
            frame = stack[-1]
            match = next(frame.pending, None)
            if match is None:
                frame.parts.append(frame.document.body[frame.pos :])
                states[frame.document.identifier] = VisitState.EMITTED
                stack.pop()
                text = "".join(frame.parts)
                if not stack:
                    return text
                stack[-1].parts.append(text)
                continue

            document = frame.document
            frame.parts.append(document.body[frame.pos : match.start()])
            frame.pos = match.end()

            target = match.group(1).strip()
            if target not in merged or target not in graph:
                raise UnresolvedIncludeError(
                    target, document.identifier, line_of(document, match.start())
                )

            state = states.get(target, VisitState.UNVISITED)
            chain = [f.document.identifier for f in stack]
            if state is VisitState.IN_PROGRESS:
                raise CyclicIncludeError(chain[chain.index(target) :])
            if state is VisitState.EMITTED:
                continue
            # the target would sit at depth len(stack)
            if len(stack) > self.max_depth:
                raise IncludeDepthError(document.identifier, self.max_depth, [*chain, target])
            stack.append(enter(target))


def compose_sources(
    sources: Iterable[Source],
    roots: Sequence[str],
    *,
    duplicates: str = "error",
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> List[ResolvedDocument]:
    """Run the full load → merge → resolve → compose pipeline."""
    registry = DocumentLoader(duplicates=duplicates).load(sources)
    merged = OverrideMerger().merge(registry)
    graph = IncludeResolver().resolve(merged)
    return CompositionEngine(max_depth=max_depth).compose(roots, merged, graph)


__all__ = ["CompositionEngine", "VisitState", "compose_sources", "DEFAULT_MAX_DEPTH"]
