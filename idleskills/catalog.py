from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Protocol, Sequence, TypeVar

from idleskills._types import round_half_up

MS_PER_HOUR = 3_600_000

BASIC_XP_PER_ACTION = 1
BASIC_ACTION_DURATION_MS = 1000


@dataclass(frozen=True)
class Tool:
    """Equippable modifier for one skill. Efficiency multiplies XP gained."""

    skill_name: str
    name: str
    efficiency: float = 1.0
    required_level: int = 1


@dataclass(frozen=True)
class TrainingMethod:
    """One trainable action for one skill."""

    skill_name: str
    name: str
    xp_per_action: int
    action_duration_ms: int
    required_level: int = 1

    @classmethod
    def basic(cls, skill_name: str) -> TrainingMethod:
        """Fallback action for skills with nothing unlocked in the catalog."""
        return cls(
            skill_name=skill_name,
            name="Basic training",
            xp_per_action=BASIC_XP_PER_ACTION,
            action_duration_ms=BASIC_ACTION_DURATION_MS,
        )

    def xp_per_action_with(self, tool: Tool | None = None) -> int:
        """XP credited for one completed action, rounded to nearest."""
        efficiency = tool.efficiency if tool is not None else 1.0
        return round_half_up(self.xp_per_action * efficiency)

    def xp_per_hour(self, tool: Tool | None = None) -> int:
        efficiency = tool.efficiency if tool is not None else 1.0
        actions_per_hour = MS_PER_HOUR / self.action_duration_ms
        return round_half_up(self.xp_per_action * efficiency * actions_per_hour)


class _Gated(Protocol):
    required_level: int


G = TypeVar("G", bound=_Gated)


def unlocked(items: Sequence[G], current_level: int) -> list[G]:
    """Items whose required level is met, catalog order preserved."""
    return [item for item in items if item.required_level <= current_level]


def best_available(items: Sequence[G], current_level: int) -> G | None:
    """Highest-requirement unlocked item; first in catalog order on ties."""
    best: G | None = None
    for item in unlocked(items, current_level):
        if best is None or item.required_level > best.required_level:
            best = item
    return best


class CatalogProvider(ABC):
    """Source of the static per-skill methods and tools tables."""

    @abstractmethod
    def methods_for(self, skill_name: str) -> list[TrainingMethod]: ...

    @abstractmethod
    def tools_for(self, skill_name: str) -> list[Tool]: ...

    def best_method(self, skill_name: str, level: int) -> TrainingMethod | None:
        return best_available(self.methods_for(skill_name), level)

    def best_tool(self, skill_name: str, level: int) -> Tool | None:
        return best_available(self.tools_for(skill_name), level)


@dataclass
class StaticCatalog(CatalogProvider):
    """Catalog backed by flat lists, grouped by skill name on construction."""

    methods: list[TrainingMethod] = field(default_factory=list)
    tools: list[Tool] = field(default_factory=list)

    _methods_by_skill: dict[str, list[TrainingMethod]] = field(
        default_factory=dict, init=False, repr=False
    )
    _tools_by_skill: dict[str, list[Tool]] = field(
        default_factory=dict, init=False, repr=False
    )

    def __post_init__(self) -> None:
        for m in self.methods:
            self._methods_by_skill.setdefault(m.skill_name, []).append(m)
        for t in self.tools:
            self._tools_by_skill.setdefault(t.skill_name, []).append(t)

    def methods_for(self, skill_name: str) -> list[TrainingMethod]:
        return list(self._methods_by_skill.get(skill_name, []))

    def tools_for(self, skill_name: str) -> list[Tool]:
        return list(self._tools_by_skill.get(skill_name, []))
