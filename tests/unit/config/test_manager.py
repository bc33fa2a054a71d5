"""Tests for ConfigManager (bundled defaults, project YAML, env overrides)."""
import pytest
import yaml

from strata.core.config import ConfigManager
from strata.core.exceptions import ConfigError


def _write_yaml(path, data):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(yaml.safe_dump(data), encoding="utf-8")


def test_bundled_defaults(isolated_project_env):
    cfg = ConfigManager(isolated_project_env).load_config()
    assert cfg["composition"]["max_depth"] == 64
    assert cfg["composition"]["duplicates"] == "error"
    assert cfg["composition"]["layers"]["base"] == ["prompts"]
    assert cfg["output"] == {"dir": ".strata/_generated", "manifest": True}
    assert cfg["logging"]["level"] == "WARNING"


def test_repo_root_defaults_to_env(isolated_project_env):
    assert ConfigManager().repo_root == isolated_project_env


def test_project_and_local_precedence(isolated_project_env):
    cfg_dir = isolated_project_env / ".strata"
    _write_yaml(cfg_dir / "config" / "composition.yaml", {"composition": {"max_depth": 8, "duplicates": "last_wins"}})
    _write_yaml(cfg_dir / "config.local" / "composition.yaml", {"composition": {"max_depth": 4}})

    cfg = ConfigManager(isolated_project_env).load_config()
    assert cfg["composition"]["max_depth"] == 4
    assert cfg["composition"]["duplicates"] == "last_wins"
    assert cfg["composition"]["patterns"] == ["*.md"]


def test_array_append_marker(isolated_project_env):
    _write_yaml(
        isolated_project_env / ".strata" / "config" / "layers.yaml",
        {"composition": {"layers": {"base": ["+", "vendor/prompts"]}}},
    )
    cfg = ConfigManager(isolated_project_env).load_config()
    assert cfg["composition"]["layers"]["base"] == ["prompts", "vendor/prompts"]


def test_env_overrides_are_coerced(isolated_project_env, monkeypatch):
    monkeypatch.setenv("STRATA_COMPOSITION__MAX_DEPTH", "12")
    monkeypatch.setenv("STRATA_OUTPUT__MANIFEST", "false")
    monkeypatch.setenv("STRATA_COMPOSITION__EXCLUDE", '["drafts/*"]')
    monkeypatch.setenv("STRATA_LOGGING__LEVEL", "debug")

    mgr = ConfigManager(isolated_project_env)
    cfg = mgr.load_config()
    assert cfg["composition"]["max_depth"] == 12
    assert cfg["output"]["manifest"] is False
    assert cfg["composition"]["exclude"] == ["drafts/*"]
    assert mgr.get("logging.level", config=cfg) == "debug"


def test_env_key_with_empty_segment(isolated_project_env, monkeypatch):
    monkeypatch.setenv("STRATA_COMPOSITION____MAX_DEPTH", "3")
    with pytest.raises(ConfigError, match="empty segment"):
        ConfigManager(isolated_project_env).load_config()


def test_schema_violation(isolated_project_env):
    _write_yaml(
        isolated_project_env / ".strata" / "config" / "bad.yaml",
        {"composition": {"duplicates": "first_wins"}},
    )
    with pytest.raises(ConfigError) as exc:
        ConfigManager(isolated_project_env).load_config()
    assert exc.value.context["path"] == "composition.duplicates"


def test_schema_can_be_skipped(isolated_project_env):
    _write_yaml(isolated_project_env / ".strata" / "config" / "x.yaml", {"unknown": {"a": 1}})
    cfg = ConfigManager(isolated_project_env).load_config(validate=False)
    assert cfg["unknown"] == {"a": 1}


def test_invalid_yaml_fails_closed(isolated_project_env):
    path = isolated_project_env / ".strata" / "config" / "broken.yaml"
    path.write_text("composition: [\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="Invalid YAML"):
        ConfigManager(isolated_project_env).load_config()


def test_non_mapping_yaml_rejected(isolated_project_env):
    path = isolated_project_env / ".strata" / "config" / "list.yaml"
    path.write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="must contain a mapping"):
        ConfigManager(isolated_project_env).load_config()


def test_get_with_default(isolated_project_env):
    mgr = ConfigManager(isolated_project_env)
    assert mgr.get("composition.max_depth") == 64
    assert mgr.get("composition.nope", "fallback") == "fallback"
