"""Project root and project config directory resolution.

Resolution priority for the project root:
1. STRATA_PROJECT_ROOT environment variable
2. Nearest ancestor of the working directory holding ``.strata/`` or ``.git/``
3. The working directory itself
"""
from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

from strata.core.exceptions import StrataError

PROJECT_ROOT_ENV = "STRATA_PROJECT_ROOT"
PROJECT_CONFIG_DIR = ".strata"


class StrataPathError(StrataError):
    """Raised when the project root cannot be resolved."""


def resolve_project_root(start: Optional[Path] = None) -> Path:
    """Resolve the project root.

    Raises:
        StrataPathError: If STRATA_PROJECT_ROOT points at a missing path or
            at the ``.strata`` directory itself
    """
    env_root = os.environ.get(PROJECT_ROOT_ENV)
    if env_root:
        env_path = Path(env_root).expanduser().resolve()
        if not env_path.exists():
            raise StrataPathError(
                f"{PROJECT_ROOT_ENV} points at missing path: {env_path}",
                context={"path": str(env_path)},
            )
        if env_path.name == PROJECT_CONFIG_DIR:
            raise StrataPathError(
                f"{PROJECT_ROOT_ENV} points to the {PROJECT_CONFIG_DIR} directory: {env_path}. "
                "It must point to the project root.",
                context={"path": str(env_path)},
            )
        return env_path

    cwd = (start or Path.cwd()).resolve()
    for candidate in (cwd, *cwd.parents):
        if (candidate / PROJECT_CONFIG_DIR).is_dir() or (candidate / ".git").exists():
            return candidate
    return cwd


def get_project_config_dir(repo_root: Path, create: bool = False) -> Path:
    """Return ``<repo_root>/.strata``, optionally creating it."""
    path = Path(repo_root) / PROJECT_CONFIG_DIR
    if create:
        path.mkdir(parents=True, exist_ok=True)
    return path


__all__ = [
    "PROJECT_ROOT_ENV",
    "PROJECT_CONFIG_DIR",
    "StrataPathError",
    "resolve_project_root",
    "get_project_config_dir",
]
