"""Ordered question engine.

A batch is a list of `Question` evaluated top to bottom. Each `when` predicate sees
the answers collected so far in the same batch; a question whose predicate is false
is left out of the result entirely. Dotted names (`pull_requests.enabled`) build
nested dictionaries.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Callable, Literal, Sequence

from core.errors import ValidationError
from core.interfaces.prompter import Prompter

Answers = dict[str, Any]

REPO_PATTERN = re.compile(r".+/.+")


@dataclass(frozen=True)
class Question:
    name: str
    message: str
    kind: Literal["confirm", "input"] = "confirm"
    when: Callable[[Answers], bool] | None = None
    validate: Callable[[str], None] | None = None


def lookup(answers: Answers, name: str, default: Any = None) -> Any:
    """Read a dotted key from a nested answer record."""

    node: Any = answers
    for part in name.split("."):
        if not isinstance(node, dict) or part not in node:
            return default
        node = node[part]
    return node


def _assign(answers: Answers, name: str, value: Any) -> None:
    *parents, leaf = name.split(".")
    node = answers
    for part in parents:
        node = node.setdefault(part, {})
    node[leaf] = value


def _ask_one(prompter: Prompter, question: Question) -> Any:
    if question.kind == "confirm":
        return prompter.confirm(question.message)

    while True:
        value = prompter.text(question.message)
        if question.validate is None:
            return value
        try:
            question.validate(value)
        except ValidationError as exc:
            prompter.error(exc.message)
            continue
        return value


def ask(prompter: Prompter, questions: Sequence[Question]) -> Answers:
    answers: Answers = {}
    for question in questions:
        if question.when is not None and not question.when(answers):
            continue
        _assign(answers, question.name, _ask_one(prompter, question))
    return answers


def validate_repo_name(value: str) -> None:
    if not REPO_PATTERN.match(value):
        raise ValidationError("Must be in the format organization/repo")
