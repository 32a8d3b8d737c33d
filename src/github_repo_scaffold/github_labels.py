"""Shared GitHub label conventions.

Every scaffolded repository gets the same label taxonomy, split into three
groups:
- priority: P0 (drop everything) down to P4 (probably never)
- issue type: bug, improvement, feature, tech debt
- state: blocked, awaiting review

We keep these as stable, human-readable names (not machine IDs) so that:
- repos can be bootstrapped idempotently (create or update by name)
- users can filter and report easily
"""

from __future__ import annotations

from dataclasses import dataclass

from github_repo_scaffold.github.specs import LabelSpec


@dataclass(frozen=True, slots=True)
class LabelGroup:
    name: str
    labels: tuple[LabelSpec, ...]


PRIORITY_LABELS: tuple[LabelSpec, ...] = (
    LabelSpec(
        name=":fire: P0",
        color="D93F0B",
        description="Fire. Drop everything and fix this ASAP.",
    ),
    LabelSpec(
        name=":triangular_flag_on_post: P1",
        color="FFA500",
        description="High priority. Resolve in the next few days.",
    ),
    LabelSpec(
        name=":warning: P2",
        color="FBCA04",
        description="Important. Resolve by next release.",
    ),
    LabelSpec(
        name=":grey_exclamation: P3",
        color="0E8A16",
        description="Low priority. Possibly nice to have. Resolve if time allows.",
    ),
    LabelSpec(
        name=":icecream: P4",
        color="1D76DB",
        description="Extremely low priority. Probably not worth spending time on right now.",
    ),
)

ISSUE_TYPE_LABELS: tuple[LabelSpec, ...] = (
    LabelSpec(
        name=":bug: bug",
        color="D93F0B",
        description="Something isn't working.",
    ),
    LabelSpec(
        name=":muscle: improvement",
        color="A2EEEF",
        description="An improvement on something existing.",
    ),
    LabelSpec(
        name=":sparkles: feature",
        color="5319E7",
        description="New feature or request.",
    ),
    LabelSpec(
        name=":money_mouth_face: tech debt",
        color="000000",
        description="Things weighing down the stack over the long-term.",
    ),
)

STATE_LABELS: tuple[LabelSpec, ...] = (
    LabelSpec(
        name=":no_entry_sign: blocked",
        color="D93F0B",
        description="Blocked on something external. Waiting to be unblocked.",
    ),
    LabelSpec(
        name=":eyes: awaiting review",
        color="FBCA04",
        description="Requires review before proceeding.",
    ),
)


LABEL_GROUPS: tuple[LabelGroup, ...] = (
    LabelGroup(name="priority", labels=PRIORITY_LABELS),
    LabelGroup(name="issue-type", labels=ISSUE_TYPE_LABELS),
    LabelGroup(name="state", labels=STATE_LABELS),
)


def all_label_specs() -> tuple[LabelSpec, ...]:
    return tuple(spec for group in LABEL_GROUPS for spec in group.labels)


_LABELS_BY_NAME: dict[str, LabelSpec] = {spec.name: spec for spec in all_label_specs()}


def label_spec_by_name(name: str) -> LabelSpec | None:
    """Look up a standard label by its exact name; surrounding whitespace is ignored."""

    return _LABELS_BY_NAME.get(name.strip())
