"""Compose generator units into one plan and run it phase by phase.

`compose` walks each root reference depth-first (a unit before its sub-units)
and keeps only the first occurrence of every identity. `run` then executes the
phases in `PHASES` order, and within a phase the units in plan order, so a
unit's writing never starts before every unit has finished configuring.

Errors raised by a phase behaviour abort the run. Nothing is rolled back:
remote changes are idempotent and the scaffold is expected to be re-run.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field
from enum import Enum

from github_repo_scaffold.generators.phases import PHASES, Phase, phase_index
from github_repo_scaffold.generators.unit import GeneratorUnit, GeneratorUnitRef, UnitContext

logger = logging.getLogger(__name__)


class CompositionCycleError(RuntimeError):
    def __init__(self, path: Sequence[str]) -> None:
        self.path = tuple(path)
        super().__init__("Generator units depend on themselves: " + " -> ".join(self.path))


class IllegalUnitTransitionError(ValueError):
    pass


class UnitState(str, Enum):
    UNINSTANTIATED = "uninstantiated"
    COMPOSED = "composed"
    RUNNING = "running"
    COMPLETE = "complete"


@dataclass(slots=True)
class PlannedUnit:
    ref: GeneratorUnitRef
    unit: GeneratorUnit
    state: UnitState = UnitState.COMPOSED
    phase: Phase | None = None

    @property
    def identity(self) -> str:
        return self.ref.identity

    def enter(self, phase: Phase) -> None:
        if self.state not in {UnitState.COMPOSED, UnitState.RUNNING}:
            raise IllegalUnitTransitionError(
                f"{self.identity}: cannot enter {phase.value} from {self.state.value}"
            )
        if self.phase is not None and phase_index(phase) <= phase_index(self.phase):
            raise IllegalUnitTransitionError(
                f"{self.identity}: cannot go back from {self.phase.value} to {phase.value}"
            )
        self.state = UnitState.RUNNING
        self.phase = phase

    def finish(self) -> None:
        if self.state is not UnitState.RUNNING or self.phase is not PHASES[-1]:
            raise IllegalUnitTransitionError(
                f"{self.identity}: cannot complete before running every phase"
            )
        self.state = UnitState.COMPLETE


@dataclass(slots=True)
class ExecutionPlan:
    units: list[PlannedUnit] = field(default_factory=list)

    @property
    def identities(self) -> list[str]:
        return [planned.identity for planned in self.units]

    def unit(self, identity: str) -> GeneratorUnit:
        for planned in self.units:
            if planned.identity == identity:
                return planned.unit
        raise KeyError(identity)

    def __iter__(self) -> Iterator[PlannedUnit]:
        return iter(self.units)

    def __len__(self) -> int:
        return len(self.units)


@dataclass(slots=True)
class RunReport:
    executed: list[tuple[str, Phase]] = field(default_factory=list)


def compose(root_refs: Sequence[GeneratorUnitRef], context: UnitContext) -> ExecutionPlan:
    """Flatten the composition trees below `root_refs` into a deduplicated plan.

    Raises:
        CompositionCycleError: if a unit is reachable from itself.
    """

    plan = ExecutionPlan()
    seen: set[str] = set()

    def visit(ref: GeneratorUnitRef, stack: tuple[str, ...]) -> None:
        if ref.identity in stack:
            raise CompositionCycleError([*stack, ref.identity])
        if ref.identity in seen:
            logger.debug(
                "Generator unit already composed",
                extra={"unit": ref.identity, "via": "/".join(stack)},
            )
            return

        seen.add(ref.identity)
        unit = ref.instantiate(context)
        plan.units.append(PlannedUnit(ref=ref, unit=unit))

        for child in unit.compose_with():
            visit(child, (*stack, ref.identity))

    for root in root_refs:
        visit(root, ())

    logger.info("Composed generator plan", extra={"units": plan.identities})
    return plan


def run(plan: ExecutionPlan) -> RunReport:
    """Run every unit's behaviour phase by phase."""

    report = RunReport()

    for phase in PHASES:
        if phase is Phase.CONFIGURING:
            for planned in plan:
                planned.unit.answers.freeze()

        for planned in plan:
            planned.enter(phase)
            behavior = planned.unit.phase_behaviors().get(phase)
            if behavior is None:
                continue

            logger.debug("Running phase", extra={"unit": planned.identity, "phase": phase.value})
            try:
                behavior()
            except Exception:
                logger.error(
                    "Generator unit failed; aborting run",
                    extra={"unit": planned.identity, "phase": phase.value},
                )
                raise
            report.executed.append((planned.identity, phase))

    for planned in plan:
        planned.finish()

    logger.info("Generator run complete", extra={"units": plan.identities})
    return report
