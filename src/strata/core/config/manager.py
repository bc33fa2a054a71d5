"""
Strata configuration management (layered YAML + environment overrides).
"""
from __future__ import annotations

import json
import logging
import os
import re
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Tuple

import jsonschema
import yaml

from strata.core.exceptions import ConfigError
from strata.core.utils.io import iter_yaml_files, read_yaml
from strata.core.utils.merge import deep_merge as _deep_merge
from strata.core.utils.paths import get_project_config_dir, resolve_project_root
from strata.data import get_data_path, read_json

logger = logging.getLogger(__name__)

ENV_PREFIX = "STRATA_"


class ConfigManager:
    """Load, merge, and validate Strata configuration.

    Configuration sources (highest to lowest priority):
    1. Environment variables: STRATA_<section>__<key>
    2. Project-local config: <repo>/.strata/config.local/*.yaml (uncommitted)
    3. Project config: <repo>/.strata/config/*.yaml
    4. Bundled defaults: strata.data/config/*.yaml

    Files inside one directory are merged in alphabetical order.
    """

    def __init__(self, repo_root: Optional[Path] = None) -> None:
        self.repo_root = Path(repo_root) if repo_root else resolve_project_root()
        project_dir = get_project_config_dir(self.repo_root, create=False)

        self.core_config_dir = get_data_path("config")
        self.project_config_dir = project_dir / "config"
        self.project_local_config_dir = project_dir / "config.local"

    def config_dirs(self) -> List[Path]:
        """Config directories in low → high precedence order (excluding env)."""
        return [self.core_config_dir, self.project_config_dir, self.project_local_config_dir]

    def deep_merge(self, base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        """Recursively merge dictionaries. Delegates to shared implementation."""
        return _deep_merge(base, override)

    def load_yaml(self, path: Path) -> Dict[str, Any]:
        # Fail closed: configuration must never silently ignore invalid YAML.
        try:
            data = read_yaml(path, default={}, raise_on_error=True)
        except (OSError, yaml.YAMLError) as exc:
            raise ConfigError(f"Invalid YAML in {path}: {exc}", context={"path": str(path)}) from exc
        if not isinstance(data, dict):
            raise ConfigError(
                f"Config file must contain a mapping: {path}", context={"path": str(path)}
            )
        return data

    # ========== Environment overrides ==========

    def _as_bool(self, v: str) -> Optional[bool]:
        low = v.strip().lower()
        if low in {"true", "false"}:
            return low == "true"
        return None

    def _as_int(self, v: str) -> Optional[int]:
        if re.fullmatch(r"[-+]?\d+", v.strip() or " "):
            return int(v)
        return None

    def _as_float(self, v: str) -> Optional[float]:
        s = v.strip()
        if re.fullmatch(r"[-+]?\d*\.\d+", s) or re.fullmatch(r"[-+]?\d+\.\d*", s):
            return float(s)
        return None

    def _as_json(self, v: str) -> Optional[Any]:
        s = v.strip()
        if (s.startswith("{") and s.endswith("}")) or (s.startswith("[") and s.endswith("]")):
            try:
                return json.loads(s)
            except json.JSONDecodeError:
                return None
        return None

    def _coerce_type(self, value: str) -> Any:
        for caster in (self._as_bool, self._as_int, self._as_float, self._as_json):
            result = caster(value)
            if result is not None:
                return result
        return value.strip()

    def _iter_env_overrides(self) -> Iterator[Tuple[List[str], Any]]:
        # Only double-underscore keys are config paths; STRATA_PROJECT_ROOT and
        # similar single-segment variables are not.
        for key in sorted(os.environ):
            if not key.startswith(ENV_PREFIX):
                continue
            raw = key[len(ENV_PREFIX) :]
            if "__" not in raw:
                continue
            segs = raw.split("__")
            if any(not s for s in segs):
                raise ConfigError(f"Malformed {ENV_PREFIX}* key: empty segment in '{key}'.")
            yield [s.lower() for s in segs], self._coerce_type(os.environ[key])

    def apply_env_overrides(self, cfg: Dict[str, Any]) -> Dict[str, Any]:
        for path, value in self._iter_env_overrides():
            cur = cfg
            for part in path[:-1]:
                nxt = cur.get(part)
                if not isinstance(nxt, dict):
                    nxt = {}
                    cur[part] = nxt
                cur = nxt
            cur[path[-1]] = value
            logger.debug("Env override %s = %r", ".".join(path), value)
        return cfg

    # ========== Loading ==========

    def validate_schema(self, config: Dict[str, Any]) -> None:
        schema = read_json("schemas", "config.schema.json")
        validator = jsonschema.Draft202012Validator(schema)
        errors = sorted(validator.iter_errors(config), key=lambda e: list(e.path))
        if errors:
            first = errors[0]
            where = ".".join(str(p) for p in first.path) or "<root>"
            raise ConfigError(
                f"Invalid configuration at {where}: {first.message}",
                context={"path": where, "errors": [e.message for e in errors]},
            )

    def load_config(self, validate: bool = True) -> Dict[str, Any]:
        """Return the merged configuration dictionary.

        Raises:
            ConfigError: Invalid YAML, malformed env key, or schema violation
        """
        cfg: Dict[str, Any] = {}
        for directory in self.config_dirs():
            for path in iter_yaml_files(directory):
                cfg = self.deep_merge(cfg, self.load_yaml(path))
        cfg = self.apply_env_overrides(cfg)
        if validate:
            self.validate_schema(cfg)
        return cfg

    def get(self, dotted: str, default: Any = None, *, config: Optional[Dict[str, Any]] = None) -> Any:
        """Get a config value by dot-separated path, e.g. ``composition.max_depth``."""
        current: Any = config if config is not None else self.load_config()
        for part in dotted.split("."):
            if not isinstance(current, dict) or part not in current:
                return default
            current = current[part]
        return current


__all__ = ["ConfigManager", "ENV_PREFIX"]
