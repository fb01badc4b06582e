from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Callable, Mapping

from idleskills._types import compare

if TYPE_CHECKING:
    from idleskills.skill import Skill


class Requirement(ABC):
    """Base class for all requirements: boolean conditions on skill state."""

    @abstractmethod
    def evaluate(self, skills: Mapping[str, Skill]) -> bool: ...

    @abstractmethod
    def describe(self) -> str: ...

    def __and__(self, other: Requirement) -> Requirement:
        return _AllRequirement([self, other])

    def __or__(self, other: Requirement) -> Requirement:
        return _AnyRequirement([self, other])


# ── Private implementations ──────────────────────────────────────────


class _SkillLevelRequirement(Requirement):
    def __init__(self, skill_name: str, op: str, threshold: int) -> None:
        self.skill_name = skill_name
        self.op = op
        self.threshold = threshold

    def evaluate(self, skills: Mapping[str, Skill]) -> bool:
        # A skill missing from the store never satisfies a level check
        skill = skills.get(self.skill_name)
        if skill is None:
            return False
        return compare(skill.level, self.op, self.threshold)

    def describe(self) -> str:
        return f"{self.skill_name} level {self.op} {self.threshold}"


class _TotalLevelRequirement(Requirement):
    def __init__(self, op: str, threshold: int) -> None:
        self.op = op
        self.threshold = threshold

    def evaluate(self, skills: Mapping[str, Skill]) -> bool:
        return compare(sum(s.level for s in skills.values()), self.op, self.threshold)

    def describe(self) -> str:
        return f"total level {self.op} {self.threshold}"


class _AllRequirement(Requirement):
    def __init__(self, reqs: list[Requirement]) -> None:
        self.reqs = reqs

    def evaluate(self, skills: Mapping[str, Skill]) -> bool:
        return all(r.evaluate(skills) for r in self.reqs)

    def describe(self) -> str:
        return " AND ".join(r.describe() for r in self.reqs)


class _AnyRequirement(Requirement):
    def __init__(self, reqs: list[Requirement]) -> None:
        self.reqs = reqs

    def evaluate(self, skills: Mapping[str, Skill]) -> bool:
        return any(r.evaluate(skills) for r in self.reqs)

    def describe(self) -> str:
        return " OR ".join(r.describe() for r in self.reqs)


class _CustomRequirement(Requirement):
    def __init__(self, fn: Callable[[Mapping[str, Skill]], bool], description: str) -> None:
        self.fn = fn
        self.description = description

    def evaluate(self, skills: Mapping[str, Skill]) -> bool:
        return self.fn(skills)

    def describe(self) -> str:
        return self.description


# ── Public factory ───────────────────────────────────────────────────


class Req:
    """Factory for built-in requirement types."""

    @staticmethod
    def skill_level(skill_name: str, op: str, threshold: int) -> Requirement:
        return _SkillLevelRequirement(skill_name, op, threshold)

    @staticmethod
    def total_level(op: str, threshold: int) -> Requirement:
        return _TotalLevelRequirement(op, threshold)

    @staticmethod
    def all(*reqs: Requirement) -> Requirement:
        return _AllRequirement(list(reqs))

    @staticmethod
    def any(*reqs: Requirement) -> Requirement:
        return _AnyRequirement(list(reqs))

    @staticmethod
    def custom(
        fn: Callable[[Mapping[str, Skill]], bool],
        description: str = "custom",
    ) -> Requirement:
        return _CustomRequirement(fn, description)
