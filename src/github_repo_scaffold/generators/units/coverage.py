"""Test coverage reporting.

`TestCoverageUnit` has no behaviour of its own; it pulls in the Codecov unit,
which writes `codecov.yml`.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from github_repo_scaffold.generators.phases import Phase
from github_repo_scaffold.generators.unit import (
    Answers,
    GeneratorUnitRef,
    PhaseBehavior,
    UnitContext,
)
from github_repo_scaffold.prompting import Question

QUESTIONS: tuple[Question, ...] = (
    Question(
        key="coverage_target",
        prompt="What project coverage target should Codecov enforce?",
        default="auto",
    ),
)


class CodecovUnit:
    identity = "codecov"
    location = "codecov"

    def __init__(self, context: UnitContext) -> None:
        self._context = context
        self.answers = Answers()

    def compose_with(self) -> Sequence[GeneratorUnitRef]:
        return ()

    def phase_behaviors(self) -> Mapping[Phase, PhaseBehavior]:
        return {Phase.PROMPTING: self.prompting, Phase.WRITING: self.writing}

    def prompting(self) -> None:
        self.answers.update(self._context.ask(QUESTIONS))

    def writing(self) -> None:
        self._context.renderer.render(
            f"{self.location}/codecov.yml.j2",
            self._context.destination / "codecov.yml",
            {"coverage_target": self.answers["coverage_target"]},
        )


class TestCoverageUnit:
    __test__ = False  # not a pytest test class

    identity = "test-coverage"
    location = "test-coverage"

    def __init__(self, context: UnitContext) -> None:
        self._context = context
        self.answers = Answers()

    def compose_with(self) -> Sequence[GeneratorUnitRef]:
        return (GeneratorUnitRef.of(CodecovUnit),)

    def phase_behaviors(self) -> Mapping[Phase, PhaseBehavior]:
        return {}
