"""CLI tests driving ``strata`` through the dispatcher in-process."""
import json

import pytest

from strata.cli._dispatcher import build_parser, discover_commands, main


@pytest.fixture
def project(isolated_project_env, write_doc):
    root = isolated_project_env
    write_doc(root / "prompts", "agents/reviewer", "---\nname: reviewer\n---\nReview.\n{include:shared/rules}")
    write_doc(root / "prompts", "shared/rules", "Base rules")
    write_doc(root / ".strata" / "extensions", "shared/rules", "Extension rules")
    return root


def _json(capsys):
    return json.loads(capsys.readouterr().out)


class TestDispatcher:
    def test_commands_discovered(self):
        assert set(discover_commands()) == {"compose", "explain", "graph", "validate"}

    def test_no_command_prints_help(self, capsys):
        assert main([]) == 1
        assert "compose" in capsys.readouterr().out

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc:
            build_parser().parse_args(["--version"])
        assert exc.value.code == 0
        assert "strata" in capsys.readouterr().out


class TestCompose:
    def test_writes_output_and_manifest(self, project, capsys):
        assert main(["compose", "agents/reviewer"]) == 0
        out_dir = project / ".strata" / "_generated"
        text = (out_dir / "agents" / "reviewer.md").read_text(encoding="utf-8")
        assert text == "---\nname: reviewer\n---\nReview.\nExtension rules"
        manifest = json.loads((out_dir / "manifest.json").read_text(encoding="utf-8"))
        assert manifest["documents"]["agents/reviewer"]["contributors"] == ["agents/reviewer", "shared/rules"]
        assert "Composed 1 document(s)" in capsys.readouterr().out

    def test_all_with_custom_out(self, project, tmp_path, capsys):
        out = tmp_path / "custom"
        assert main(["compose", "--all", "--out", str(out), "--json"]) == 0
        payload = _json(capsys)
        assert payload["success"] is True
        assert [d["identifier"] for d in payload["documents"]] == ["agents/reviewer", "shared/rules"]
        assert (out / "shared" / "rules.md").read_text(encoding="utf-8") == "Extension rules"

    def test_dry_run_json_writes_nothing(self, project, capsys):
        assert main(["compose", "agents/reviewer", "--dry-run", "--json"]) == 0
        [doc] = _json(capsys)["documents"]
        assert doc["body"] == "Review.\nExtension rules"
        assert doc["metadata"] == {"name": "reviewer"}
        assert not (project / ".strata" / "_generated").exists()

    def test_local_flag_overrides_layer(self, project, tmp_path, write_doc, capsys):
        local = tmp_path / "mine"
        write_doc(local, "shared/rules", "My rules")
        assert main(["compose", "agents/reviewer", "--dry-run", "--local", str(local)]) == 0
        assert "My rules" in capsys.readouterr().out

    def test_unknown_root(self, project, capsys):
        assert main(["compose", "nope", "--json"]) == 1
        error = _json(capsys)["error"]
        assert error["code"] == "EmptyRootError"
        assert error["context"]["identifier"] == "nope"

    def test_unwritable_output_reports_error(self, project, tmp_path, capsys):
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory", encoding="utf-8")
        assert main(["compose", "agents/reviewer", "--out", str(blocker), "--json"]) == 1
        error = _json(capsys)["error"]
        assert error["code"] == "compose_error"
        assert error["context"]["type"] == "NotADirectoryError"

    def test_no_roots(self, project, capsys):
        assert main(["compose"]) == 1
        assert "No root identifiers" in capsys.readouterr().err


class TestValidate:
    def test_valid_project(self, project, capsys):
        assert main(["validate", "--json"]) == 0
        payload = _json(capsys)
        assert payload == {"success": True, "valid": True, "documents": 2, "includes": 1, "overridden": 1}

    def test_cycle_reports_path_and_files(self, project, write_doc, capsys):
        write_doc(project / ".strata" / "local", "shared/rules", "{include:agents/reviewer}")
        assert main(["validate"]) == 1
        err = capsys.readouterr().err
        assert "CyclicIncludeError: Circular include detected" in err
        assert "cycle: agents/reviewer -> shared/rules -> agents/reviewer" in err
        assert str(project / ".strata" / "local" / "shared" / "rules.md") in err

    def test_unresolved_include_json(self, project, write_doc, capsys):
        write_doc(project / "prompts", "broken", "x\n{include:missing}")
        assert main(["validate", "--json"]) == 1
        error = _json(capsys)["error"]
        assert error["code"] == "UnresolvedIncludeError"
        assert error["context"]["target"] == "missing"
        assert error["context"]["line"] == 2
        assert error["context"]["files"]["broken"] == [str(project / "prompts" / "broken.md")]

    def test_malformed_front_matter(self, project, write_doc, capsys):
        write_doc(project / "prompts", "bad", "---\nname foo\n---\n")
        assert main(["validate", "--json"]) == 1
        error = _json(capsys)["error"]
        assert error["code"] == "MalformedFrontMatterError"
        assert error["context"]["identifier"] == "bad"
        assert error["context"]["line"] == 2

    def test_duplicate_across_layer_dirs(self, project, tmp_path, write_doc, capsys):
        other = tmp_path / "other"
        write_doc(other, "shared/rules", "again")
        args = ["validate", "--json", "--base", str(project / "prompts"), "--base", str(other)]
        assert main(args) == 1
        assert _json(capsys)["error"]["code"] == "DuplicateIdentifierError"

    def test_invalid_config(self, project, capsys):
        (project / ".strata" / "config" / "x.yaml").write_text("composition:\n  max_depth: -1\n", encoding="utf-8")
        assert main(["validate", "--json"]) == 1
        assert _json(capsys)["error"]["code"] == "ConfigError"


class TestExplain:
    def test_layers_and_includes(self, project, capsys):
        assert main(["explain", "shared/rules", "--json"]) == 0
        payload = _json(capsys)
        assert [(l["layer"], l["applied"]) for l in payload["layers"]] == [("EXTENSION", True), ("BASE", False)]
        assert payload["layers"][0]["path"] == str(project / ".strata" / "extensions" / "shared" / "rules.md")

        assert main(["explain", "agents/reviewer", "--json"]) == 0
        payload = _json(capsys)
        assert payload["metadata"] == {"name": "reviewer"}
        assert payload["includes"] == [{"target": "shared/rules", "line": 5, "known": True}]

    def test_text_output(self, project, capsys):
        assert main(["explain", "shared/rules"]) == 0
        out = capsys.readouterr().out
        assert "- EXTENSION (applied)" in out
        assert "- BASE (shadowed)" in out

    def test_unknown_identifier(self, project, capsys):
        assert main(["explain", "ghost"]) == 1
        assert "EmptyRootError" in capsys.readouterr().err


class TestGraph:
    def test_json(self, project, capsys):
        assert main(["graph", "--json"]) == 0
        payload = _json(capsys)
        assert payload["nodes"] == ["agents/reviewer", "shared/rules"]
        assert payload["edges"] == [{"source": "agents/reviewer", "target": "shared/rules", "line": 5}]

    def test_text(self, project, capsys):
        assert main(["graph"]) == 0
        assert "agents/reviewer -> shared/rules (line 5)" in capsys.readouterr().out
