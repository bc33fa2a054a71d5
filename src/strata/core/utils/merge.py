"""Merging of layered configuration mappings.

ConfigManager folds bundled defaults, ``.strata/config`` and
``.strata/config.local`` into one mapping with :func:`deep_merge`. Nested
sections merge key by key; lists such as ``composition.layers.base`` follow
:func:`merge_arrays`:

    composition:
      layers:
        base: ["+", "vendor/prompts"]   # keep bundled dirs, add one
        extension: ["=", "ext"]         # replace (same as a plain list)
"""
from __future__ import annotations

from typing import Any, Dict, List, Mapping

APPEND_MARKER = "+"
REPLACE_MARKER = "="


def deep_merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> Dict[str, Any]:
    """Return ``base`` with ``override`` layered on top. Inputs are not mutated.

    Example:
        >>> deep_merge({"output": {"dir": "a", "manifest": True}}, {"output": {"dir": "b"}})
        {'output': {'dir': 'b', 'manifest': True}}
    """
    merged: Dict[str, Any] = dict(base)
    for key, value in (override or {}).items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = deep_merge(current, value)
        elif isinstance(current, list) and isinstance(value, list):
            merged[key] = merge_arrays(current, value)
        else:
            merged[key] = value
    return merged


def merge_arrays(base: List[Any], override: List[Any]) -> List[Any]:
    """Layer a list from a higher config source onto ``base``.

    A leading ``"+"`` appends the remaining items, a leading ``"="`` or no
    marker replaces the list.

    Example:
        >>> merge_arrays(["prompts"], ["+", "vendor/prompts"])
        ['prompts', 'vendor/prompts']
    """
    if not override:
        return list(base)
    head, rest = override[0], override[1:]
    if head == APPEND_MARKER:
        return [*base, *rest]
    if head == REPLACE_MARKER:
        return list(rest)
    return list(override)


__all__ = ["deep_merge", "merge_arrays", "APPEND_MARKER", "REPLACE_MARKER"]
