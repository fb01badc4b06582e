from __future__ import annotations

import time
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable

from idleskills.events import SessionEvent, SessionFailedEvent, SkillUpdatedEvent
from idleskills.stream import Subscription

if TYPE_CHECKING:
    from idleskills.session import TrainingSession


@dataclass
class ActionRecord:
    time: float
    skill_name: str
    method_name: str
    tool_name: str | None
    xp_gained: int
    level: int
    xp: int


@dataclass
class LevelUpRecord:
    time: float
    skill_name: str
    level: int
    levels_gained: int


@dataclass
class FailureRecord:
    time: float
    skill_name: str
    error: str


class MetricsCollector:
    """Records completed actions, level-ups and failures of a training session."""

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self.started_at = clock()
        self._subscription: Subscription | None = None

        self.actions: list[ActionRecord] = []
        self.level_ups: list[LevelUpRecord] = []
        self.failures: list[FailureRecord] = []

    def attach(self, session: TrainingSession) -> None:
        self.detach()
        self._subscription = session.events.subscribe(self.record)

    def detach(self) -> None:
        if self._subscription is not None:
            self._subscription.cancel()
            self._subscription = None

    def elapsed(self) -> float:
        return self._clock() - self.started_at

    def record(self, event: SessionEvent) -> None:
        if isinstance(event, SkillUpdatedEvent):
            self.record_action(event)
        elif isinstance(event, SessionFailedEvent):
            self.failures.append(
                FailureRecord(time=self.elapsed(), skill_name=event.skill_name, error=event.error)
            )

    def record_action(self, event: SkillUpdatedEvent) -> None:
        now = self.elapsed()
        self.actions.append(
            ActionRecord(
                time=now,
                skill_name=event.skill.name,
                method_name=event.method.name,
                tool_name=event.tool.name if event.tool else None,
                xp_gained=event.xp_gained,
                level=event.skill.level,
                xp=event.skill.xp,
            )
        )
        if event.leveled_up:
            self.level_ups.append(
                LevelUpRecord(
                    time=now,
                    skill_name=event.skill.name,
                    level=event.skill.level,
                    levels_gained=event.levels_gained,
                )
            )
