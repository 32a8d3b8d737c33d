from __future__ import annotations

from enum import Enum


class Phase(str, Enum):
    INITIALIZING = "initializing"
    PROMPTING = "prompting"
    CONFIGURING = "configuring"
    WRITING = "writing"
    INSTALLING = "installing"


# Closed and ordered: every unit's behaviour for one phase runs before any
# unit's behaviour for the next.
PHASES: tuple[Phase, ...] = (
    Phase.INITIALIZING,
    Phase.PROMPTING,
    Phase.CONFIGURING,
    Phase.WRITING,
    Phase.INSTALLING,
)


def phase_index(phase: Phase) -> int:
    return PHASES.index(phase)
