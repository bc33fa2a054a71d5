"""Layered document composition.

Components (leaf-first):

- loader:      DocumentLoader - (layer, identifier, text) → document registry
- frontmatter: FrontMatterParser - metadata block / body split
- merger:      OverrideMerger - one effective document per identifier
- includes:    IncludeResolver - include graph, unresolved and cyclic checks
- engine:      CompositionEngine - depth-first include expansion per root

Collaborators outside the pure core:

- discovery:   SourceDiscovery - read layer directories from disk
- output:      CompositionWriter - write composed documents and manifest
"""
from __future__ import annotations

from .discovery import LayerSource, SourceDiscovery, layer_dirs_from_config
from .engine import DEFAULT_MAX_DEPTH, CompositionEngine, VisitState, compose_sources
from .errors import (
    CompositionError,
    CyclicIncludeError,
    DuplicateIdentifierError,
    EmptyRootError,
    IncludeDepthError,
    MalformedFrontMatterError,
    UnresolvedIncludeError,
)
from .frontmatter import FrontMatterParser, ParsedFrontMatter, parse_frontmatter
from .includes import INCLUDE_PATTERN, IncludeResolver
from .loader import DocumentLoader, DocumentRegistry
from .merger import OverrideMerger
from .output import CompositionWriter
from .types import Document, IncludeEdge, IncludeGraph, ResolvedDocument

__all__ = [
    # Pipeline
    "DocumentLoader",
    "DocumentRegistry",
    "FrontMatterParser",
    "ParsedFrontMatter",
    "parse_frontmatter",
    "IncludeResolver",
    "INCLUDE_PATTERN",
    "OverrideMerger",
    "CompositionEngine",
    "VisitState",
    "DEFAULT_MAX_DEPTH",
    "compose_sources",
    # Types
    "Document",
    "IncludeEdge",
    "IncludeGraph",
    "ResolvedDocument",
    # Errors
    "CompositionError",
    "DuplicateIdentifierError",
    "MalformedFrontMatterError",
    "UnresolvedIncludeError",
    "CyclicIncludeError",
    "EmptyRootError",
    "IncludeDepthError",
    # Collaborators
    "LayerSource",
    "SourceDiscovery",
    "layer_dirs_from_config",
    "CompositionWriter",
]
