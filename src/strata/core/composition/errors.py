"""Composition error classes.

Every error here is terminal for the current composition run. Offending
identifiers, layers and line numbers are kept in ``context`` so the CLI can
render them as structured output.
"""
from __future__ import annotations

from typing import Optional, Sequence

from strata.core.exceptions import StrataError
from strata.core.layers import Layer


class CompositionError(StrataError):
    """Base class for all composition failures."""


class DuplicateIdentifierError(CompositionError):
    """Raised when an identifier is loaded twice within one layer."""

    def __init__(self, layer: Layer, identifier: str) -> None:
        self.layer = layer
        self.identifier = identifier
        super().__init__(
            f"Duplicate identifier '{identifier}' in layer {layer.name}",
            context={"layer": layer.name, "identifier": identifier},
        )


class MalformedFrontMatterError(CompositionError):
    """Raised when a front matter block cannot be parsed."""

    def __init__(
        self,
        reason: str,
        *,
        line: Optional[int] = None,
        identifier: Optional[str] = None,
    ) -> None:
        self.reason = reason
        self.line = line
        self.identifier = identifier
        where = identifier or "<document>"
        if line is not None:
            where = f"{where}:{line}"
        super().__init__(
            f"Malformed front matter in {where}: {reason}",
            context={"identifier": identifier, "line": line, "reason": reason},
        )

    def with_identifier(self, identifier: str) -> "MalformedFrontMatterError":
        """Return a copy of this error tagged with ``identifier``."""
        return MalformedFrontMatterError(self.reason, line=self.line, identifier=identifier)


class UnresolvedIncludeError(CompositionError):
    """Raised when an include directive names an unknown identifier."""

    def __init__(self, target: str, referenced_by: str, line: Optional[int] = None) -> None:
        self.target = target
        self.referenced_by = referenced_by
        self.line = line
        loc = f"{referenced_by}:{line}" if line is not None else referenced_by
        super().__init__(
            f"Include not found: '{target}' (from {loc})",
            context={"target": target, "referenced_by": referenced_by, "line": line},
        )


class CyclicIncludeError(CompositionError):
    """Raised when the include graph contains a cycle.

    ``cycle`` starts at the re-entered identifier and does not repeat it:
    ``a -> b -> a`` is reported as ``["a", "b"]``.
    """

    def __init__(self, cycle: Sequence[str]) -> None:
        self.cycle = list(cycle)
        chain = " -> ".join([*self.cycle, self.cycle[0]]) if self.cycle else ""
        super().__init__(
            f"Circular include detected: {chain}",
            context={"cycle": self.cycle},
        )


class EmptyRootError(CompositionError):
    """Raised when a requested root identifier has no document."""

    def __init__(self, identifier: str) -> None:
        self.identifier = identifier
        super().__init__(
            f"Root document not found: '{identifier}'",
            context={"identifier": identifier},
        )


class IncludeDepthError(CompositionError):
    """Raised when include nesting exceeds the configured maximum depth."""

    def __init__(self, identifier: str, max_depth: int, chain: Sequence[str]) -> None:
        self.identifier = identifier
        self.max_depth = max_depth
        self.chain = list(chain)
        super().__init__(
            f"Include depth exceeded (>{max_depth}) while processing {identifier}. "
            f"Chain: {' -> '.join(self.chain)}",
            context={"identifier": identifier, "max_depth": max_depth, "chain": self.chain},
        )


__all__ = [
    "CompositionError",
    "DuplicateIdentifierError",
    "MalformedFrontMatterError",
    "UnresolvedIncludeError",
    "CyclicIncludeError",
    "EmptyRootError",
    "IncludeDepthError",
]
