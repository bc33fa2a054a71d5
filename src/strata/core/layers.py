"""Source layers for composition.

Every document is registered under exactly one layer. When the same
identifier exists in several layers, the highest precedence wins:

    LOCAL_OVERRIDE > EXTENSION > BASE

Layer assignment is the caller's job (directory location, naming convention);
the core only consumes the resulting tag.
"""
from __future__ import annotations

from enum import Enum
from typing import List, Union


class Layer(Enum):
    """Precedence tier for a document (low → high)."""

    BASE = 0
    EXTENSION = 1
    LOCAL_OVERRIDE = 2

    @property
    def precedence(self) -> int:
        return self.value

    @property
    def slug(self) -> str:
        """Lowercase config/CLI name, e.g. ``local_override``."""
        return self.name.lower()

    @classmethod
    def parse(cls, raw: Union[str, "Layer"]) -> "Layer":
        """Return the layer for ``raw``.

        Accepts members, member names in any case, and dashed forms such as
        ``local-override``.

        Raises:
            ValueError: If ``raw`` names no layer.
        """
        if isinstance(raw, Layer):
            return raw
        key = str(raw).strip().replace("-", "_").upper()
        try:
            return cls[key]
        except KeyError:
            valid = ", ".join(l.slug for l in cls)
            raise ValueError(f"Unknown layer '{raw}'. Expected one of: {valid}") from None

    @classmethod
    def ordered(cls, *, highest_first: bool = False) -> List["Layer"]:
        """Return all layers sorted by precedence."""
        return sorted(cls, key=lambda l: l.precedence, reverse=highest_first)

    def __str__(self) -> str:
        return self.name


__all__ = ["Layer"]
