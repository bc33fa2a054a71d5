"""Unified CLI output formatting utilities.

Supports both JSON and text output modes. JSON goes to stdout; text-mode
errors go to stderr.
"""
from __future__ import annotations

import json
import sys
from typing import Any, Dict, Optional

from strata.core.exceptions import StrataError


class OutputFormatter:
    """Unified output formatter for CLI commands."""

    def __init__(self, json_mode: bool = False, indent: int = 2):
        self.json_mode = json_mode
        self.indent = indent

    def success(self, data: Dict[str, Any], message: str) -> None:
        """Output success result (``message`` in text mode, ``data`` in JSON mode)."""
        if self.json_mode:
            self.json_output({"success": True, **data})
        else:
            print(message)

    def error(
        self,
        error: Exception,
        message: Optional[str] = None,
        *,
        error_code: str = "ERROR",
    ) -> None:
        """Output a non-Strata error."""
        msg = message or str(error)
        if self.json_mode:
            self.json_output(
                {
                    "success": False,
                    "error": {"message": msg, "code": error_code, "context": {"type": type(error).__name__}},
                }
            )
        else:
            print(f"{error_code}: {msg}", file=sys.stderr)

    def strata_error(self, error: StrataError, extra: Optional[Dict[str, Any]] = None) -> None:
        """Output a StrataError: kind, offending identifiers and cycle path."""
        payload = error.to_json_error()
        if extra:
            payload["context"] = {**payload["context"], **extra}
        if self.json_mode:
            self.json_output({"success": False, "error": payload})
            return

        print(f"{payload['code']}: {payload['message']}", file=sys.stderr)
        for key, value in payload["context"].items():
            if value is None:
                continue
            if key == "cycle":
                value = " -> ".join([*value, value[0]]) if value else ""
            elif isinstance(value, dict):
                print(f"  {key}:", file=sys.stderr)
                for name, paths in value.items():
                    print(f"    {name}: {', '.join(str(p) for p in paths)}", file=sys.stderr)
                continue
            elif isinstance(value, (list, tuple)):
                value = ", ".join(str(v) for v in value)
            print(f"  {key}: {value}", file=sys.stderr)

    def json_output(self, data: Any) -> None:
        print(json.dumps(data, indent=self.indent, default=str))

    def text(self, message: str) -> None:
        print(message)


__all__ = ["OutputFormatter"]
