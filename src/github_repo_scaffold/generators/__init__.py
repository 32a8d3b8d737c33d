"""Composable generator units and the phase scheduler."""

from github_repo_scaffold.generators.phases import PHASES, Phase
from github_repo_scaffold.generators.scheduler import (
    CompositionCycleError,
    ExecutionPlan,
    RunReport,
    compose,
    run,
)
from github_repo_scaffold.generators.unit import (
    Answers,
    AnswersFrozenError,
    GeneratorUnit,
    GeneratorUnitRef,
    UnitContext,
)

__all__ = [
    "PHASES",
    "Answers",
    "AnswersFrozenError",
    "CompositionCycleError",
    "ExecutionPlan",
    "GeneratorUnit",
    "GeneratorUnitRef",
    "Phase",
    "RunReport",
    "UnitContext",
    "compose",
    "run",
]
