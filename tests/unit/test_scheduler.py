"""Unit tests for generator composition and phase scheduling.

Units here record each behaviour they run into a shared log so tests can assert
on the global execution order.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

import pytest

from github_repo_scaffold.generators import (
    PHASES,
    Answers,
    AnswersFrozenError,
    CompositionCycleError,
    GeneratorUnitRef,
    Phase,
    UnitContext,
    compose,
    run,
)
from github_repo_scaffold.generators.scheduler import IllegalUnitTransitionError, UnitState

Log = list[tuple[str, Phase]]


class RecordingUnit:
    instances: list[str] = []

    def __init__(
        self,
        context: UnitContext,
        *,
        identity: str,
        log: Log,
        children: Sequence[GeneratorUnitRef] = (),
        phases: Sequence[Phase] = PHASES,
        fail_in: Phase | None = None,
        answers: Mapping[str, Any] | None = None,
        answer_in: Phase = Phase.PROMPTING,
    ) -> None:
        self.identity = identity
        self.answers = Answers()
        self._log = log
        self._children = children
        self._phases = phases
        self._fail_in = fail_in
        self._answers = dict(answers or {})
        self._answer_in = answer_in
        RecordingUnit.instances.append(identity)

    def compose_with(self) -> Sequence[GeneratorUnitRef]:
        return self._children

    def _behavior(self, phase: Phase):
        def behave() -> None:
            if phase is self._answer_in and self._answers:
                self.answers.update(self._answers)
            if phase is self._fail_in:
                raise RuntimeError(f"{self.identity} failed in {phase.value}")
            self._log.append((self.identity, phase))

        return behave

    def phase_behaviors(self):
        return {phase: self._behavior(phase) for phase in self._phases}


def unit(identity: str, log: Log, *children: GeneratorUnitRef, **kwargs: Any) -> GeneratorUnitRef:
    return GeneratorUnitRef(
        identity=identity,
        factory=RecordingUnit,
        location=identity.lower(),
        arguments={"identity": identity, "log": log, "children": children, **kwargs},
    )


@pytest.fixture(autouse=True)
def reset_instances() -> None:
    RecordingUnit.instances = []


def test_shared_sub_unit_is_kept_at_its_first_position(unit_context: UnitContext) -> None:
    log: Log = []
    b = unit("B", log)
    root = unit("A", log, b, unit("C", log, b))

    plan = compose([root], unit_context)

    assert plan.identities == ["A", "B", "C"]
    assert RecordingUnit.instances == ["A", "B", "C"]


def test_units_shared_between_roots_appear_once(unit_context: UnitContext) -> None:
    log: Log = []
    shared = unit("shared", log)

    plan = compose([unit("A", log, shared), unit("B", log, shared)], unit_context)

    assert plan.identities == ["A", "shared", "B"]


def test_every_phase_finishes_for_all_units_before_the_next(unit_context: UnitContext) -> None:
    log: Log = []
    root = unit("A", log, unit("B", log, unit("D", log)), unit("C", log))

    plan = compose([root], unit_context)
    report = run(plan)

    order = plan.identities
    assert log == [(identity, phase) for phase in PHASES for identity in order]
    assert report.executed == log

    last_configuring = max(i for i, (_, p) in enumerate(log) if p is Phase.CONFIGURING)
    first_writing = min(i for i, (_, p) in enumerate(log) if p is Phase.WRITING)
    assert last_configuring < first_writing


def test_units_without_a_behaviour_for_a_phase_are_skipped(unit_context: UnitContext) -> None:
    log: Log = []
    root = unit("A", log, unit("B", log, phases=(Phase.WRITING,)), phases=())

    plan = compose([root], unit_context)
    run(plan)

    assert log == [("B", Phase.WRITING)]
    assert all(planned.state is UnitState.COMPLETE for planned in plan)


def test_cycles_are_reported_before_any_phase_runs(unit_context: UnitContext) -> None:
    log: Log = []
    a_again = unit("A", log)
    root = unit("A", log, unit("B", log, a_again))

    with pytest.raises(CompositionCycleError) as excinfo:
        compose([root], unit_context)

    assert excinfo.value.path == ("A", "B", "A")
    assert "A -> B -> A" in str(excinfo.value)
    assert log == []


def test_self_reference_is_a_cycle(unit_context: UnitContext) -> None:
    log: Log = []

    with pytest.raises(CompositionCycleError):
        compose([unit("A", log, unit("A", log))], unit_context)


def test_failure_aborts_the_run_without_later_behaviours(unit_context: UnitContext) -> None:
    log: Log = []
    root = unit("A", log, unit("B", log, fail_in=Phase.CONFIGURING), unit("C", log))
    plan = compose([root], unit_context)

    with pytest.raises(RuntimeError, match="B failed in configuring"):
        run(plan)

    assert ("A", Phase.CONFIGURING) in log
    assert ("C", Phase.CONFIGURING) not in log
    assert not any(phase is Phase.WRITING for _, phase in log)


def test_answers_are_writable_while_prompting(unit_context: UnitContext) -> None:
    log: Log = []
    plan = compose([unit("A", log, answers={"repo_name": "widget"})], unit_context)

    run(plan)

    answers = plan.unit("A").answers
    assert answers["repo_name"] == "widget"
    assert answers.frozen


def test_answers_are_frozen_once_configuring_starts(unit_context: UnitContext) -> None:
    log: Log = []
    plan = compose(
        [unit("A", log, answers={"late": True}, answer_in=Phase.CONFIGURING)], unit_context
    )

    with pytest.raises(AnswersFrozenError):
        run(plan)


def test_planned_units_cannot_go_back_to_an_earlier_phase(unit_context: UnitContext) -> None:
    log: Log = []
    plan = compose([unit("A", log)], unit_context)
    planned = plan.units[0]

    planned.enter(Phase.WRITING)
    with pytest.raises(IllegalUnitTransitionError):
        planned.enter(Phase.CONFIGURING)
    with pytest.raises(IllegalUnitTransitionError):
        planned.finish()


def test_ref_rejects_a_unit_reporting_another_identity(unit_context: UnitContext) -> None:
    log: Log = []
    ref = GeneratorUnitRef(
        identity="expected",
        factory=RecordingUnit,
        arguments={"identity": "actual", "log": log},
    )

    with pytest.raises(ValueError):
        compose([ref], unit_context)
