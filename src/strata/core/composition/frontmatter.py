"""Front matter parsing for source documents.

A front matter block opens with a ``---`` marker on the very first line and
closes at the next ``---`` line. Everything in between is one ``key: value``
pair per line:

    ---
    name: code-reviewer
    tools: [Read, Grep, Glob]
    model: sonnet
    ---

    # Body starts here

Each value is read as YAML, so it must be a scalar or a flow list of
strings. Blocks are scanned line by line first, which keeps duplicate keys
and line numbers visible to error reporting.

A document without an opening marker has no metadata and its whole text is
the body.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, Optional

import yaml

from .errors import MalformedFrontMatterError
from .types import MetadataValue

FRONTMATTER_MARKER = "---"

_KEY_VALUE_RE = re.compile(r"^\s*([A-Za-z_][A-Za-z0-9_.-]*)\s*:(?:\s+(.*)|\s*)$")
_SCALAR_TYPES = (str, int, float, bool)


@dataclass(frozen=True)
class ParsedFrontMatter:
    """Result of splitting a document into metadata and body.

    Attributes:
        metadata: Parsed key/value pairs, or None when the document has no block
        body: Text following the closing marker (or the whole input)
        body_line_offset: Number of raw lines preceding the body
    """

    metadata: Optional[Dict[str, MetadataValue]]
    body: str
    body_line_offset: int = 0


def _is_marker(line: str) -> bool:
    return line.rstrip() == FRONTMATTER_MARKER


def _load_value(key: str, raw: str, *, line: int, identifier: Optional[str]) -> MetadataValue:
    """Parse one value with ``yaml.safe_load``; empty and ``null`` become ``""``."""
    if raw.startswith("[") and "]" not in raw:
        raise MalformedFrontMatterError(
            f"unterminated list for key '{key}'", line=line, identifier=identifier
        )
    try:
        value = yaml.safe_load(raw) if raw else None
    except yaml.YAMLError as exc:
        problem = getattr(exc, "problem", None) or "invalid YAML"
        raise MalformedFrontMatterError(
            f"invalid value for key '{key}': {problem}", line=line, identifier=identifier
        ) from exc

    if value is None:
        return ""
    if isinstance(value, _SCALAR_TYPES):
        return value
    if isinstance(value, list) and all(isinstance(item, str) for item in value):
        return value
    raise MalformedFrontMatterError(
        f"value for key '{key}' must be a scalar or a list of strings", line=line, identifier=identifier
    )


class FrontMatterParser:
    """Split raw document text into ``(metadata, body)``."""

    marker = FRONTMATTER_MARKER

    def parse(self, raw_text: str, identifier: Optional[str] = None) -> ParsedFrontMatter:
        """Parse ``raw_text``.

        Args:
            raw_text: Full document text
            identifier: Optional document identifier for error messages

        Returns:
            ParsedFrontMatter with metadata (or None) and body

        Raises:
            MalformedFrontMatterError: Unmatched opening marker, an invalid
                line inside the block, a duplicated key, or a value that is not
                a scalar or a list of strings
        """
        if not has_frontmatter(raw_text):
            return ParsedFrontMatter(metadata=None, body=raw_text, body_line_offset=0)

        lines = raw_text.split("\n")
        metadata: Dict[str, MetadataValue] = {}
        for idx in range(1, len(lines)):
            line = lines[idx].rstrip("\r")
            lineno = idx + 1
            if _is_marker(line):
                body = "\n".join(lines[idx + 1 :])
                return ParsedFrontMatter(metadata=metadata, body=body, body_line_offset=idx + 1)

            stripped = line.strip()
            if not stripped or stripped.startswith("#"):
                continue

            match = _KEY_VALUE_RE.match(line)
            if match is None:
                raise MalformedFrontMatterError(
                    f"expected 'key: value', got {stripped!r}", line=lineno, identifier=identifier
                )
            key = match.group(1)
            raw_value = (match.group(2) or "").strip()
            if key in metadata:
                raise MalformedFrontMatterError(
                    f"duplicate key '{key}'", line=lineno, identifier=identifier
                )

            metadata[key] = _load_value(key, raw_value, line=lineno, identifier=identifier)

        raise MalformedFrontMatterError(
            f"opening '{FRONTMATTER_MARKER}' marker has no closing marker",
            line=1,
            identifier=identifier,
        )


def parse_frontmatter(raw_text: str, identifier: Optional[str] = None) -> ParsedFrontMatter:
    """Module-level convenience wrapper around :class:`FrontMatterParser`."""
    return FrontMatterParser().parse(raw_text, identifier)


def has_frontmatter(raw_text: str) -> bool:
    """Return True when ``raw_text`` opens with a front matter marker."""
    first = raw_text.split("\n", 1)[0]
    return _is_marker(first)


__all__ = [
    "FRONTMATTER_MARKER",
    "ParsedFrontMatter",
    "FrontMatterParser",
    "parse_frontmatter",
    "has_frontmatter",
]
