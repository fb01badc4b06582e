from __future__ import annotations

import inspect
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from loguru import logger

from idleskills._types import ResetCallback
from idleskills.requirement import Req, Requirement
from idleskills.stream import StateStream, Subscription

if TYPE_CHECKING:
    from idleskills.repository import PrestigeRepository, ProgressionRepository
    from idleskills.skill import Skill

DEFAULT_REQUIRED_LEVEL = 99


@dataclass(frozen=True)
class Prestige:
    """Stored prestige level plus the derived eligibility flag."""

    level: int = 0
    can_prestige: bool = False


@dataclass(frozen=True)
class PrestigeLevelConfig:
    """Static configuration for one prestige tier."""

    visible_skills: list[str] = field(default_factory=list)
    required_skills: list[str] | None = None
    required_level: int = DEFAULT_REQUIRED_LEVEL
    extra_requirement: Requirement | None = None

    def __post_init__(self) -> None:
        if self.required_skills is None:
            object.__setattr__(self, "required_skills", list(self.visible_skills))

    def requirement(self) -> Requirement | None:
        """Required skills at the required level plus any extra condition.

        None when the tier asks for nothing, which makes it unreachable.
        """
        base: Requirement | None = None
        if self.required_skills:
            base = Req.all(
                *(Req.skill_level(name, ">=", self.required_level) for name in self.required_skills)
            )
        if self.extra_requirement is None:
            return base
        if base is None:
            return self.extra_requirement
        return base & self.extra_requirement


class PrestigeConfig:
    """Prestige tiers keyed by prestige level."""

    def __init__(self, tiers: dict[int, PrestigeLevelConfig] | None = None) -> None:
        self.tiers: dict[int, PrestigeLevelConfig] = dict(tiers or {})

    def tier(self, level: int) -> PrestigeLevelConfig | None:
        return self.tiers.get(level)

    def highest_tier(self) -> PrestigeLevelConfig | None:
        if not self.tiers:
            return None
        return self.tiers[max(self.tiers)]

    def visible_skills(self, level: int) -> list[str]:
        """Skills shown at *level*; unconfigured levels use the highest tier."""
        cfg = self.tier(level) or self.highest_tier()
        return list(cfg.visible_skills) if cfg else []

    def required_skills(self, level: int) -> list[str]:
        cfg = self.tier(level)
        return list(cfg.required_skills or []) if cfg else []

    def required_level(self, level: int) -> int:
        cfg = self.tier(level)
        return cfg.required_level if cfg else DEFAULT_REQUIRED_LEVEL


@dataclass(frozen=True)
class PrestigeResult:
    """Outcome of a prestige attempt."""

    success: bool
    level: int = 0
    skills_reset: list[str] = field(default_factory=list)
    reason: str = ""


class PrestigeGate:
    """Evaluates prestige eligibility and performs the reset."""

    def __init__(
        self,
        skills: ProgressionRepository,
        prestige: PrestigeRepository,
        config: PrestigeConfig,
    ) -> None:
        self.skills = skills
        self.prestige = prestige
        self.config = config
        self.states: StateStream[Prestige] = StateStream(Prestige())
        self._latest_skills: list[Skill] = []
        self._latest_level = 0
        self._subscriptions: list[Subscription] = []

    # ── Queries ──────────────────────────────────────────────────────

    @property
    def state(self) -> Prestige:
        return self.states.value

    def check(self, level: int, skills: list[Skill]) -> Prestige:
        """Pure eligibility check for a prestige level and skill snapshot."""
        tier = self.config.tier(level)
        req = tier.requirement() if tier else None
        if req is None:
            return Prestige(level=level, can_prestige=False)
        by_name = {s.name: s for s in skills}
        return Prestige(level=level, can_prestige=req.evaluate(by_name))

    async def evaluate(self) -> Prestige:
        stored = await self.prestige.get()
        skills = await self.skills.get_all()
        return self.check(stored.level, skills)

    def visible_skills(self, level: int) -> list[str]:
        return self.config.visible_skills(level)

    # ── Actions ──────────────────────────────────────────────────────

    async def perform_prestige(self, reset_callback: ResetCallback | None = None) -> PrestigeResult:
        """Reset every skill and advance one prestige level if eligible.

        *reset_callback* runs before any skill is touched so an active
        training loop can be stopped first.
        """
        current = await self.evaluate()
        if not current.can_prestige:
            return PrestigeResult(
                success=False,
                level=current.level,
                reason="Requirements not met",
            )

        if reset_callback is not None:
            result = reset_callback()
            if inspect.isawaitable(result):
                await result

        skills = await self.skills.get_all()
        reset = await self.skills.reset_all(skills)
        new_level = current.level + 1
        await self.prestige.update(Prestige(level=new_level))
        logger.info(f"Prestiged to level {new_level}; reset {len(reset)} skill(s)")

        return PrestigeResult(
            success=True,
            level=new_level,
            skills_reset=[s.name for s in reset],
        )

    # ── Live state ───────────────────────────────────────────────────

    def start(self) -> None:
        """Recompute eligibility on every skill or prestige change."""
        if self._subscriptions:
            return
        self._subscriptions = [
            self.skills.observe().subscribe(self._on_skills),
            self.prestige.observe().subscribe(self._on_prestige),
        ]

    def close(self) -> None:
        for sub in self._subscriptions:
            sub.cancel()
        self._subscriptions = []

    def _on_skills(self, skills: list[Skill]) -> None:
        self._latest_skills = skills
        self._republish()

    def _on_prestige(self, prestige: Prestige) -> None:
        self._latest_level = prestige.level
        self._republish()

    def _republish(self) -> None:
        new = self.check(self._latest_level, self._latest_skills)
        if new != self.states.value:
            self.states.publish(new)
