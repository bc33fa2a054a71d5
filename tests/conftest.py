import os
from pathlib import Path

import pytest

from strata.core.stdlib_logging import reset_logging_for_tests
from strata.core.utils.paths import PROJECT_ROOT_ENV


@pytest.fixture(autouse=True)
def _reset_strata_logging():
    """CLI runs install a handler on the ``strata`` logger; drop it after each test."""
    yield
    reset_logging_for_tests()


@pytest.fixture
def isolated_project_env(tmp_path, monkeypatch):
    """Create an isolated project root and point Strata at it.

    All tests touching config or the CLI MUST use this fixture so the real
    repository (and the developer's STRATA_* environment) never leaks in.
    """
    for key in list(os.environ):
        if key.startswith("STRATA_"):
            monkeypatch.delenv(key, raising=False)

    root = tmp_path / "project"
    (root / ".strata" / "config").mkdir(parents=True)
    (root / "prompts").mkdir()
    monkeypatch.setenv(PROJECT_ROOT_ENV, str(root))
    monkeypatch.chdir(root)
    return root


@pytest.fixture
def write_doc():
    """Write a Markdown document under a layer directory."""

    def _write(base: Path, identifier: str, text: str) -> Path:
        path = base / f"{identifier}.md"
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        return path

    return _write
