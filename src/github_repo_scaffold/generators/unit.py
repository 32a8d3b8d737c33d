"""The generator unit contract.

A unit is any object exposing:
- `identity`: a string used to deduplicate units across composition trees
- `answers`: its `Answers` record
- `compose_with()`: references to the sub-units it needs
- `phase_behaviors()`: a mapping from `Phase` to a zero-argument callable

Units receive an explicit `UnitContext` at construction instead of reaching for
shared state.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Protocol

from github_repo_scaffold.config import ScaffoldSettings
from github_repo_scaffold.generators.phases import Phase
from github_repo_scaffold.github.reconciler import ResourceReconciler
from github_repo_scaffold.prompting import Prompter, Question, collect_answers
from github_repo_scaffold.rendering import TemplateRenderer


class AnswersFrozenError(RuntimeError):
    pass


class Answers(Mapping[str, Any]):
    """Answers collected for one unit.

    Writable until frozen; the scheduler freezes every unit's answers when the
    configuring phase starts.
    """

    def __init__(self, values: Mapping[str, Any] | None = None) -> None:
        self._values: dict[str, Any] = dict(values or {})
        self._frozen = False

    @property
    def frozen(self) -> bool:
        return self._frozen

    def freeze(self) -> None:
        self._frozen = True

    def update(self, values: Mapping[str, Any]) -> None:
        if self._frozen:
            raise AnswersFrozenError("Answers are read-only once configuring has started")
        self._values.update(values)

    def __getitem__(self, key: str) -> Any:
        return self._values[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"Answers({self._values!r}, frozen={self._frozen})"


PhaseBehavior = Callable[[], object]


class GeneratorUnit(Protocol):
    identity: str
    answers: Answers

    def compose_with(self) -> Sequence[GeneratorUnitRef]: ...

    def phase_behaviors(self) -> Mapping[Phase, PhaseBehavior]: ...


@dataclass(frozen=True, slots=True)
class UnitContext:
    """Everything a unit may use during a run."""

    destination: Path
    renderer: TemplateRenderer
    prompter: Prompter
    settings: ScaffoldSettings
    reconciler: ResourceReconciler | None = None
    # Preset answers (typically CLI flags); matching questions are not asked.
    options: Mapping[str, Any] = field(default_factory=dict)
    # Answers given so far in this run; a key answered by one unit is not asked again.
    answered: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "options", MappingProxyType(dict(self.options)))

    def ask(self, questions: Sequence[Question]) -> dict[str, Any]:
        return collect_answers(self.prompter, questions, self.options, self.answered)


@dataclass(frozen=True, slots=True, eq=False)
class GeneratorUnitRef:
    """A unit's identity and constructor, its template location and its arguments."""

    identity: str
    factory: Callable[..., GeneratorUnit]
    location: str = ""
    arguments: Mapping[str, Any] = field(default_factory=dict)

    @classmethod
    def of(cls, unit_type: Any, **arguments: Any) -> GeneratorUnitRef:
        """Reference a unit class through its `identity` and `location` attributes."""

        return cls(
            identity=unit_type.identity,
            factory=unit_type,
            location=getattr(unit_type, "location", ""),
            arguments=arguments,
        )

    def instantiate(self, context: UnitContext) -> GeneratorUnit:
        unit = self.factory(context, **self.arguments)
        if unit.identity != self.identity:
            raise ValueError(
                f"Unit built for {self.identity!r} reports identity {unit.identity!r}"
            )
        return unit
