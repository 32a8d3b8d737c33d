"""The root unit: a complete repository."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence

from github_repo_scaffold.generators.phases import Phase
from github_repo_scaffold.generators.unit import (
    Answers,
    GeneratorUnitRef,
    PhaseBehavior,
    UnitContext,
)
from github_repo_scaffold.generators.units.coverage import TestCoverageUnit
from github_repo_scaffold.generators.units.files import GitignoreUnit, ReadmeUnit
from github_repo_scaffold.generators.units.github import GitHubUnit

logger = logging.getLogger(__name__)


class RepositoryUnit:
    identity = "repository"
    location = "repository"

    def __init__(self, context: UnitContext, *, include_github: bool = True) -> None:
        self._context = context
        self._include_github = include_github
        self.answers = Answers()

    def compose_with(self) -> Sequence[GeneratorUnitRef]:
        refs = [
            GeneratorUnitRef.of(ReadmeUnit),
            GeneratorUnitRef.of(GitignoreUnit),
            GeneratorUnitRef.of(TestCoverageUnit),
        ]
        if self._include_github:
            refs.append(GeneratorUnitRef.of(GitHubUnit))
        return refs

    def phase_behaviors(self) -> Mapping[Phase, PhaseBehavior]:
        return {Phase.INITIALIZING: self.initializing}

    def initializing(self) -> None:
        destination = self._context.destination
        destination.mkdir(parents=True, exist_ok=True)
        logger.info("Scaffolding repository", extra={"destination": str(destination)})
