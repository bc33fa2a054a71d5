"""Override resolution across layers.

For each identifier the document from the highest-precedence layer wins
outright. There is no field-level merging: an override replaces the whole
document, front matter included.
"""
from __future__ import annotations

import logging
from typing import Dict, List, Mapping

from strata.core.layers import Layer

from .types import Document

logger = logging.getLogger(__name__)


class OverrideMerger:
    """Pick one effective document per identifier."""

    def merge(self, documents: Mapping[str, Mapping[Layer, Document]]) -> Dict[str, Document]:
        """Return identifier → winning Document, keys sorted.

        Every identifier present in any layer appears in the result.
        """
        merged: Dict[str, Document] = {}
        for identifier in sorted(documents):
            layers = self.explain(documents[identifier])
            if not layers:
                continue
            winner = layers[0]
            if len(layers) > 1:
                logger.debug(
                    "%s: %s shadows %s",
                    identifier,
                    winner.name,
                    ", ".join(l.name for l in layers[1:]),
                )
            merged[identifier] = documents[identifier][winner]
        return merged

    @staticmethod
    def explain(by_layer: Mapping[Layer, Document]) -> List[Layer]:
        """Layers defining one identifier, winner first."""
        return sorted(by_layer, key=lambda l: l.precedence, reverse=True)


__all__ = ["OverrideMerger"]
