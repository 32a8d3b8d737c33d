"""File-producing units: README and .gitignore."""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from github_repo_scaffold.generators.phases import Phase
from github_repo_scaffold.generators.unit import (
    Answers,
    GeneratorUnitRef,
    PhaseBehavior,
    UnitContext,
)
from github_repo_scaffold.generators.units.questions import (
    PACKAGE_DESCRIPTION,
    REPO_NAME,
    REPO_OWNER,
)
from github_repo_scaffold.prompting import Question

README_QUESTIONS: tuple[Question, ...] = (
    REPO_OWNER,
    REPO_NAME,
    PACKAGE_DESCRIPTION,
    Question(
        key="include_npm_shield",
        prompt="Include an npm version shield in the README?",
        default=True,
        kind="confirm",
    ),
    Question(
        key="include_circleci_shield",
        prompt="Include a CircleCI build shield in the README?",
        default=True,
        kind="confirm",
    ),
)


class ReadmeUnit:
    identity = "readme"
    location = "readme"

    def __init__(self, context: UnitContext) -> None:
        self._context = context
        self.answers = Answers()

    def compose_with(self) -> Sequence[GeneratorUnitRef]:
        return ()

    def phase_behaviors(self) -> Mapping[Phase, PhaseBehavior]:
        return {Phase.PROMPTING: self.prompting, Phase.WRITING: self.writing}

    def prompting(self) -> None:
        self.answers.update(self._context.ask(README_QUESTIONS))

    def writing(self) -> None:
        self._context.renderer.render(
            f"{self.location}/README.md.j2",
            self._context.destination / "README.md",
            {
                "repo_organization": self.answers["repo_owner"],
                "package_name": self.answers["repo_name"],
                "package_description": self.answers["package_description"],
                "include_npm_shield": bool(self.answers["include_npm_shield"]),
                "include_circleci_shield": bool(self.answers["include_circleci_shield"]),
            },
        )


class GitignoreUnit:
    identity = "gitignore"
    location = "gitignore"

    def __init__(self, context: UnitContext) -> None:
        self._context = context
        self.answers = Answers()

    def compose_with(self) -> Sequence[GeneratorUnitRef]:
        return ()

    def phase_behaviors(self) -> Mapping[Phase, PhaseBehavior]:
        return {Phase.WRITING: self.writing}

    def writing(self) -> None:
        self._context.renderer.render(
            f"{self.location}/gitignore.j2", self._context.destination / ".gitignore", {}
        )
