"""Tests for the ordered question engine."""

from __future__ import annotations

import pytest

from conftest import ScriptedPrompter
from core.errors import ValidationError
from core.services.pipeline_setup import get_ci_settings, get_name_and_repo, get_settings
from core.services.prompting import Question, ask, lookup, validate_repo_name


class TestRepoValidation:
    @pytest.mark.parametrize("value", ["rails/rails", "acme/demo", "my-org/my.repo", "a/b/c"])
    def test_accepts_owner_slash_repo(self, value):
        validate_repo_name(value)

    @pytest.mark.parametrize("value", ["", "rails", "/rails", "rails/", "/"])
    def test_rejects_malformed(self, value):
        with pytest.raises(ValidationError, match="organization/repo"):
            validate_repo_name(value)

    def test_reprompts_until_valid_and_returns_input_unchanged(self):
        prompter = ScriptedPrompter(texts=["demo", "nope", "acme/", "acme/demo"])

        name, repo = get_name_and_repo(prompter, None, None)

        assert (name, repo) == ("demo", "acme/demo")
        assert prompter.errors == ["Must be in the format organization/repo"] * 2
        assert prompter.asked.count("GitHub repository to connect to (e.g. rails/rails)") == 3


class TestNameAndRepo:
    def test_positional_args_skip_prompts(self):
        prompter = ScriptedPrompter()

        assert get_name_and_repo(prompter, "demo", "acme/demo") == ("demo", "acme/demo")
        assert prompter.asked == []

    def test_only_missing_values_are_prompted(self):
        prompter = ScriptedPrompter(texts=["acme/demo"])

        assert get_name_and_repo(prompter, "demo", None) == ("demo", "acme/demo")
        assert prompter.asked == ["GitHub repository to connect to (e.g. rails/rails)"]


class TestConditionalQuestions:
    def test_false_condition_omits_key(self):
        prompter = ScriptedPrompter(confirms=[False, False])

        answers = get_settings(prompter, "main")

        assert answers == {"auto_deploy": False, "pull_requests": {"enabled": False}}
        assert "wait_for_ci" not in answers
        assert len(prompter.asked) == 2

    def test_all_questions_when_everything_enabled(self):
        prompter = ScriptedPrompter(confirms=[True, True, True, True, False])

        answers = get_settings(prompter, "main")

        assert answers == {
            "auto_deploy": True,
            "wait_for_ci": True,
            "pull_requests": {"enabled": True, "auto_deploy": True, "auto_destroy": False},
        }
        assert prompter.asked[0] == "Automatically deploy the main branch to staging?"
        assert prompter.asked[-1] == "Automatically destroy idle review apps after 5 days?"

    def test_predicate_sees_answers_from_the_same_batch(self):
        seen = []
        questions = [
            Question(name="a", message="A?"),
            Question(name="b", message="B?", when=lambda answers: seen.append(dict(answers)) or True),
        ]

        ask(ScriptedPrompter(confirms=[True, False]), questions)

        assert seen == [{"a": True}]

    def test_lookup_handles_missing_branches(self):
        assert lookup({"pull_requests": {"enabled": True}}, "pull_requests.enabled") is True
        assert lookup({}, "pull_requests.enabled") is None
        assert lookup({"pull_requests": False}, "pull_requests.enabled", "x") == "x"


class TestCISettings:
    def test_organization_attached_when_enabled(self):
        settings = get_ci_settings(ScriptedPrompter(confirms=[True]), "acme")

        assert settings.payload() == {"ci": True, "organization": "acme"}

    def test_organization_dropped_when_disabled(self):
        settings = get_ci_settings(ScriptedPrompter(confirms=[False]), "acme")

        assert settings.payload() == {"ci": False}

    def test_personal_account(self):
        settings = get_ci_settings(ScriptedPrompter(confirms=[True]), None)

        assert settings.payload() == {"ci": True}


def test_typer_prompter_returns_input_unchanged(monkeypatch):
    from cli import prompter as prompter_module

    monkeypatch.setattr(prompter_module.typer, "prompt", lambda message: " acme/demo ")

    assert prompter_module.TyperPrompter().text("GitHub repository to connect to (e.g. rails/rails)") == " acme/demo "
