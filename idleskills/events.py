from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Union

if TYPE_CHECKING:
    from idleskills.catalog import Tool, TrainingMethod
    from idleskills.skill import Skill


@dataclass(frozen=True)
class ProgressEvent:
    generation: int
    skill_name: str
    progress: float


@dataclass(frozen=True)
class SkillUpdatedEvent:
    """One action completed and its XP was stored."""

    generation: int
    previous: Skill
    skill: Skill
    xp_gained: int
    method: TrainingMethod
    tool: Tool | None = None

    @property
    def leveled_up(self) -> bool:
        return self.skill.level > self.previous.level

    @property
    def levels_gained(self) -> int:
        return self.skill.level - self.previous.level


@dataclass(frozen=True)
class SessionFailedEvent:
    generation: int
    skill_name: str
    error: str


SessionEvent = Union[ProgressEvent, SkillUpdatedEvent, SessionFailedEvent]
