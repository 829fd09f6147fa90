"""
Tests for ConfigResolver.

Exactly one of full resolution or the name-only merge runs per call.
"""

import pytest
from codexgen.answers import AnswerSet
from codexgen.catalog import build_default_graph
from codexgen.interview import Interview
from codexgen.prompting import ScriptedPrompter
from codexgen.resolver import ConfigResolver
from codexgen.store import ConfigStore

REQUIRED = ("projectName", "framework", "ui", "registry")


def saved_answers() -> AnswerSet:
    return AnswerSet({
        "initGit": True,
        "createRemote": False,
        "projectName": "old-app",
        "license": "GPL-3.0",
        "registry": "yarn",
        "framework": "react",
        "ui": "antd",
        "routing": "app",
        "database": "mongo",
        "orm": "typeorm",
    })


@pytest.fixture
def store(tmp_path):
    return ConfigStore(tmp_path / "config.json")


def resolver_for(store, responses=None, **kwargs):
    prompter = ScriptedPrompter(responses or {}, accept_defaults=True)
    interview = Interview(build_default_graph(), prompter)
    return ConfigResolver(store, interview, **kwargs), prompter


class TestNoSavedConfig:
    def test_full_resolution_without_reuse_prompt(self, store):
        resolver, prompter = resolver_for(store)
        answers = resolver.previous_config()

        assert "reuse" not in prompter.asked_ids
        for key in REQUIRED:
            assert key in answers

    def test_candidate_name_skips_name_prompt(self, store):
        resolver, prompter = resolver_for(store)
        answers = resolver.previous_config("cli-app")
        assert answers["projectName"] == "cli-app"
        assert "projectName" not in prompter.asked_ids

    def test_overrides_forwarded(self, store):
        resolver, prompter = resolver_for(store)
        answers = resolver.previous_config(None, {"framework": "vue"})
        assert answers["routing"] == "vue-router"
        assert "framework" not in prompter.asked_ids

    def test_incomplete_record_is_ignored(self, store):
        store.save(AnswerSet({"projectName": "x", "framework": "react", "ui": "none"}))
        resolver, prompter = resolver_for(store)
        resolver.previous_config()
        assert "reuse" not in prompter.asked_ids


class TestReuse:
    """Name-only merge."""

    def test_reuse_law(self, store):
        """projectName is the new name; every other field is carried verbatim."""
        saved = saved_answers()
        store.save(saved)
        resolver, prompter = resolver_for(store, {"reuse": True, "newName": "fresh-app"})

        answers = resolver.previous_config()

        assert prompter.asked_ids == ["reuse", "newName"]
        assert answers["projectName"] == "fresh-app"
        for key, value in saved.items():
            if key != "projectName":
                assert answers[key] == value
        assert list(answers) == list(saved)

    def test_stale_answers_carried_over(self, store, caplog):
        """routing=app is inconsistent with react today; it is kept, and logged."""
        store.save(saved_answers())
        resolver, _ = resolver_for(store, {"reuse": True, "newName": "fresh-app"})

        answers = resolver.previous_config()

        assert answers["routing"] == "app"
        assert "routing" in caplog.text

    def test_overrides_ignored_on_reuse(self, store):
        store.save(saved_answers())
        resolver, _ = resolver_for(store, {"reuse": True, "newName": "fresh-app"})
        answers = resolver.previous_config(None, {"framework": "vue"})
        assert answers["framework"] == "react"

    def test_new_name_default(self, store):
        store.save(saved_answers())
        resolver, prompter = resolver_for(store, {"reuse": True})
        answers = resolver.previous_config()
        assert prompter.request_for("newName").default == "old-app-2"
        assert answers["projectName"] == "old-app-2"

    def test_candidate_name_is_new_name_default(self, store):
        store.save(saved_answers())
        resolver, prompter = resolver_for(store, {"reuse": True})
        resolver.previous_config("cli-app")
        assert prompter.request_for("newName").default == "cli-app"

    def test_new_name_validated(self, store):
        store.save(saved_answers())
        resolver, prompter = resolver_for(store, {"reuse": True, "newName": ["bad name", "", "ok_name"]})
        answers = resolver.previous_config()
        assert answers["projectName"] == "ok_name"
        assert [r[0] for r in prompter.rejections] == ["newName", "newName"]


class TestDeclineReuse:
    def test_full_resolution(self, store):
        store.save(saved_answers())
        resolver, prompter = resolver_for(store, {"reuse": False})
        answers = resolver.previous_config()

        assert prompter.asked_ids[0] == "reuse"
        assert "newName" not in prompter.asked_ids
        assert "projectName" in prompter.asked_ids
        assert answers["routing"] == "react-router"

    def test_saved_record_not_reused(self, store):
        store.save(saved_answers())
        resolver, prompter = resolver_for(store, {"reuse": False})
        answers = resolver.previous_config()
        assert prompter.request_for("license").default == "MIT"
        assert answers["license"] == "MIT"

    def test_seed_defaults_from_previous(self, store):
        store.save(saved_answers())
        resolver, prompter = resolver_for(store, {"reuse": False}, seed_defaults_from_previous=True)
        answers = resolver.previous_config()
        assert prompter.request_for("license").default == "GPL-3.0"
        assert answers["registry"] == "yarn"
