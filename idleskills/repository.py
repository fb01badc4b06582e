from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Iterable

from loguru import logger

from idleskills.prestige import Prestige
from idleskills.skill import Skill
from idleskills.stream import StateStream

if TYPE_CHECKING:
    from idleskills.level_curve import LevelCurve


class ProgressionRepository(ABC):
    """Owner of every Skill record.

    ``update`` and ``reset_all`` are the only write paths. ``observe``
    replays the latest skill list on subscribe and pushes the full list
    after each mutation.
    """

    @abstractmethod
    async def get(self, skill_name: str) -> Skill | None: ...

    @abstractmethod
    async def get_all(self) -> list[Skill]: ...

    @abstractmethod
    def observe(self) -> StateStream[list[Skill]]: ...

    @abstractmethod
    async def update(self, skill: Skill) -> Skill: ...

    @abstractmethod
    async def reset_all(self, skills: Iterable[Skill]) -> list[Skill]: ...


class InMemoryProgressionRepository(ProgressionRepository):
    """Process-local store; state is lost when the process exits."""

    def __init__(self, skill_names: Iterable[str]) -> None:
        self._skills: dict[str, Skill] = {name: Skill(name) for name in skill_names}
        self._stream: StateStream[list[Skill]] = StateStream(self._snapshot())

    async def get(self, skill_name: str) -> Skill | None:
        return self._skills.get(skill_name)

    async def get_all(self) -> list[Skill]:
        return self._snapshot()

    def observe(self) -> StateStream[list[Skill]]:
        return self._stream

    async def update(self, skill: Skill) -> Skill:
        old = self._skills.get(skill.name)
        if old is None:
            # Unknown names are ignored and the input handed back unchanged
            logger.debug(f"Ignoring update for unknown skill {skill.name!r}")
            return skill
        logger.debug(f"{skill.name}: xp {old.xp} -> {skill.xp} (level {skill.level})")
        self._skills[skill.name] = skill
        self._publish()
        return skill

    async def reset_all(self, skills: Iterable[Skill]) -> list[Skill]:
        reset: list[Skill] = []
        for skill in skills:
            if skill.name not in self._skills:
                continue
            fresh = skill.reset()
            self._skills[skill.name] = fresh
            reset.append(fresh)
        if reset:
            self._publish()
        return reset

    def _snapshot(self) -> list[Skill]:
        return list(self._skills.values())

    def _publish(self) -> None:
        self._stream.publish(self._snapshot())


class PrestigeRepository(ABC):
    """Owner of the Prestige record."""

    @abstractmethod
    async def get(self) -> Prestige: ...

    @abstractmethod
    def observe(self) -> StateStream[Prestige]: ...

    @abstractmethod
    async def update(self, prestige: Prestige) -> None: ...


class InMemoryPrestigeRepository(PrestigeRepository):
    def __init__(self, level: int = 0) -> None:
        self._stream: StateStream[Prestige] = StateStream(Prestige(level=level))

    async def get(self) -> Prestige:
        return self._stream.value

    def observe(self) -> StateStream[Prestige]:
        return self._stream

    async def update(self, prestige: Prestige) -> None:
        self._stream.publish(prestige)


async def award_xp(
    repository: ProgressionRepository,
    curve: LevelCurve,
    skill: Skill,
    amount: int,
) -> Skill:
    """Add *amount* XP to *skill*, resolve level-ups and store the result."""
    updated = curve.apply_xp(skill, amount)
    if updated.level > skill.level:
        logger.info(f"{skill.name} leveled up to {updated.level}!")
    return await repository.update(updated)
