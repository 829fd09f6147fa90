"""
Tests for the create-codex-app command line.
"""

import json
import logging
import warnings

import pytest
from codexgen.catalog import build_default_graph
from codexgen.cli import EXIT_ABORTED, EXIT_ERROR, EXIT_OK, coerce_value, configure_logging, main
from codexgen.manifest import merge
from codexgen.prompting import ScriptedPrompter


@pytest.fixture(autouse=True)
def release_warnings():
    yield
    logging.captureWarnings(False)


@pytest.fixture
def workspace(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    return tmp_path


def run(workspace, *argv, responses=None):
    config = workspace / "home" / "config.json"
    prompter = ScriptedPrompter(responses or {}, accept_defaults=True)
    code = main(["--config", str(config), *argv], prompter=prompter)
    return code, prompter, config


def test_creates_project_and_saves_config(workspace):
    code, prompter, config = run(workspace, "demo-app", "--ui", "mui")

    assert code == EXIT_OK
    manifest = json.loads((workspace / "demo-app" / "package.json").read_text(encoding="utf-8"))
    assert "@mui/material" in manifest["dependencies"]
    saved = json.loads(config.read_text(encoding="utf-8"))
    assert saved["projectName"] == "demo-app"
    assert saved["ui"] == "mui"
    assert "projectName" not in prompter.asked_ids
    assert "ui" not in prompter.asked_ids


def test_second_run_offers_reuse(workspace):
    run(workspace, "first-app")
    code, prompter, _ = run(workspace, responses={"reuse": True, "newName": "second-app"})
    assert code == EXIT_OK
    assert prompter.asked_ids == ["reuse", "newName"]
    assert (workspace / "second-app" / "package.json").exists()


def test_existing_directory_is_fatal(workspace):
    (workspace / "demo-app").mkdir()
    code, _, config = run(workspace, "demo-app")
    assert code == EXIT_ERROR
    assert not config.exists()


def test_unsupported_framework(workspace):
    code, _, config = run(workspace, "demo-app", "--framework", "next")
    assert code == EXIT_ERROR
    assert not (workspace / "demo-app").exists()
    assert not config.exists()


def test_invalid_override(workspace):
    code, _, _ = run(workspace, "demo-app", "--set", "initGit=maybe")
    assert code == EXIT_ERROR


def test_invalid_project_name(workspace):
    code, _, _ = run(workspace, "demo app")
    assert code == EXIT_ERROR


def test_set_overrides(workspace):
    code, prompter, config = run(
        workspace, "demo-app", "--set", "createRemote=yes", "--set", "setupCI=no", "--set", "remoteOrg=acme",
    )
    assert code == EXIT_OK
    saved = json.loads(config.read_text(encoding="utf-8"))
    assert saved["createRemote"] is True
    assert saved["setupCI"] is False
    assert saved["remoteOrg"] == "acme"
    assert "ciProvider" not in saved
    assert "repoVisibility" in prompter.asked_ids


class AbortingPrompter(ScriptedPrompter):
    def ask(self, request):
        raise KeyboardInterrupt


def test_abort(workspace):
    config = workspace / "config.json"
    code = main(["--config", str(config), "demo-app"], prompter=AbortingPrompter())
    assert code == EXIT_ABORTED
    assert not (workspace / "demo-app").exists()


def test_reset_config(workspace):
    config = workspace / "config.json"
    config.write_text("{}", encoding="utf-8")
    assert main(["--config", str(config), "--reset-config"]) == EXIT_OK
    assert not config.exists()


def test_dump_questions(workspace, capsys):
    assert main(["--dump-questions"]) == EXIT_OK
    out = capsys.readouterr().out
    assert "projectName" in out
    assert "react-router" in out


class TestCoerceValue:
    def test_confirm_values(self):
        graph = build_default_graph()
        assert coerce_value(graph, "initGit", "yes") is True
        assert coerce_value(graph, "initGit", "False") is False

    def test_other_kinds_unchanged(self):
        graph = build_default_graph()
        assert coerce_value(graph, "framework", "vue") == "vue"
        assert coerce_value(graph, "initGit", "maybe") == "maybe"


def test_prompt_keeps_asking_after_bad_answers(workspace):
    responses = {"projectName": ["my app", "bad!", "no way", "still bad", "good-app"]}
    code, prompter, config = run(workspace, responses=responses)

    assert code == EXIT_OK
    assert [qid for qid, _ in prompter.rejections] == ["projectName"] * 4
    assert (workspace / "good-app" / "package.json").exists()
    assert json.loads(config.read_text(encoding="utf-8"))["projectName"] == "good-app"


def test_manifest_conflicts_are_logged(caplog):
    configure_logging(verbose=False)
    with warnings.catch_warnings():
        warnings.simplefilter("always")
        with caplog.at_level(logging.WARNING, logger="py.warnings"):
            merge({"scripts": {"build": "vite build"}}, {"scripts": {"build": "tsc -b"}})

    messages = [r.getMessage() for r in caplog.records if r.name == "py.warnings"]
    assert any("scripts.build" in m for m in messages)
