"""In-memory document loading.

The loader turns ``(layer, identifier, text)`` triples supplied by a
collaborator (filesystem discovery, a remote store, tests) into parsed
:class:`Document` objects grouped by identifier and layer. It performs no
I/O of its own.
"""
from __future__ import annotations

import logging
from typing import Dict, Iterable, Optional, Tuple, Union

from strata.core.layers import Layer

from .errors import DuplicateIdentifierError, MalformedFrontMatterError
from .frontmatter import FrontMatterParser
from .types import Document

logger = logging.getLogger(__name__)

Source = Tuple[Union[Layer, str], str, str]
DocumentRegistry = Dict[str, Dict[Layer, Document]]

DUPLICATE_POLICIES = ("error", "last_wins")


class DocumentLoader:
    """Build a document registry for one composition run.

    Args:
        parser: Front matter parser (default: new FrontMatterParser)
        duplicates: ``"error"`` raises DuplicateIdentifierError when an
            identifier repeats within a layer; ``"last_wins"`` keeps the later
            document and logs a warning.
    """

    def __init__(
        self,
        parser: Optional[FrontMatterParser] = None,
        *,
        duplicates: str = "error",
    ) -> None:
        if duplicates not in DUPLICATE_POLICIES:
            raise ValueError(
                f"Unknown duplicates policy '{duplicates}'. Expected one of: {', '.join(DUPLICATE_POLICIES)}"
            )
        self.parser = parser or FrontMatterParser()
        self.duplicates = duplicates

    def load(self, sources: Iterable[Source]) -> DocumentRegistry:
        """Parse and register every source.

        Returns:
            Mapping identifier → layer → Document

        Raises:
            DuplicateIdentifierError: Same identifier twice in one layer
                (``duplicates="error"`` only)
            MalformedFrontMatterError: A document's front matter is invalid
            ValueError: Blank identifier or unknown layer name
        """
        registry: DocumentRegistry = {}
        count = 0
        for raw_layer, raw_identifier, text in sources:
            layer = Layer.parse(raw_layer)
            identifier = str(raw_identifier).strip()
            if not identifier:
                raise ValueError(f"Blank document identifier in layer {layer.name}")

            per_layer = registry.setdefault(identifier, {})
            if layer in per_layer:
                if self.duplicates == "error":
                    raise DuplicateIdentifierError(layer, identifier)
                logger.warning(
                    "Duplicate identifier '%s' in layer %s; last registered wins",
                    identifier,
                    layer.name,
                )

            per_layer[layer] = self._parse(layer, identifier, text)
            count += 1

        logger.debug("Loaded %d document(s), %d identifier(s)", count, len(registry))
        return registry

    def _parse(self, layer: Layer, identifier: str, text: str) -> Document:
        try:
            parsed = self.parser.parse(text, identifier=identifier)
        except MalformedFrontMatterError as err:
            if err.identifier is None:
                raise err.with_identifier(identifier) from err
            raise
        return Document(
            identifier=identifier,
            layer=layer,
            raw_text=text,
            body=parsed.body,
            metadata=parsed.metadata,
            body_line_offset=parsed.body_line_offset,
        )


__all__ = ["DocumentLoader", "DocumentRegistry", "Source", "DUPLICATE_POLICIES"]
