"""Question collection.

Units declare `Question`s; a prompter turns them into answers. A question is
not asked when its key is already in the preset options (typically CLI flags)
or was answered earlier in the same run.
"""

from __future__ import annotations

from collections.abc import Mapping, MutableMapping, Sequence
from dataclasses import dataclass
from typing import Any, Literal, Protocol

from rich.console import Console
from rich.prompt import Confirm, Prompt

QuestionKind = Literal["text", "confirm"]


@dataclass(frozen=True, slots=True)
class Question:
    key: str
    prompt: str
    default: Any = None
    kind: QuestionKind = "text"


class Prompter(Protocol):
    def ask(self, questions: Sequence[Question]) -> dict[str, Any]: ...


class RichPrompter:
    """Interactive prompter backed by `rich.prompt`."""

    def __init__(self, console: Console | None = None) -> None:
        self._console = console or Console()

    def ask(self, questions: Sequence[Question]) -> dict[str, Any]:
        answers: dict[str, Any] = {}
        for question in questions:
            if question.kind == "confirm":
                answers[question.key] = Confirm.ask(
                    question.prompt,
                    default=bool(question.default),
                    console=self._console,
                )
            elif question.default is None:
                answers[question.key] = Prompt.ask(question.prompt, console=self._console)
            else:
                answers[question.key] = Prompt.ask(
                    question.prompt, default=str(question.default), console=self._console
                )
        return answers


class PresetPrompter:
    """Non-interactive prompter: preset values first, then each question's default."""

    def __init__(self, presets: Mapping[str, Any] | None = None) -> None:
        self._presets = dict(presets or {})

    def ask(self, questions: Sequence[Question]) -> dict[str, Any]:
        return {q.key: self._presets.get(q.key, q.default) for q in questions}


def collect_answers(
    prompter: Prompter,
    questions: Sequence[Question],
    presets: Mapping[str, Any],
    answered: MutableMapping[str, Any] | None = None,
) -> dict[str, Any]:
    """Ask only the questions not already answered, then merge.

    `answered` is the run-wide record shared between units; new answers are
    added to it so later units reuse them instead of asking again.
    """

    known = {**(answered or {}), **presets}
    answers = {q.key: known[q.key] for q in questions if q.key in known}
    pending = [q for q in questions if q.key not in known]
    if pending:
        asked = prompter.ask(pending)
        answers.update(asked)
        if answered is not None:
            answered.update(asked)
    # Keep declaration order.
    return {q.key: answers[q.key] for q in questions}
