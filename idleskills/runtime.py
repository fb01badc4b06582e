from __future__ import annotations

from typing import TYPE_CHECKING

from loguru import logger

from idleskills.definition import GameDefinition
from idleskills.facade import ProgressionFacade, TrainingState
from idleskills.level_curve import LevelCurve
from idleskills.prestige import Prestige, PrestigeGate, PrestigeResult
from idleskills.repository import (
    InMemoryPrestigeRepository,
    InMemoryProgressionRepository,
    PrestigeRepository,
    ProgressionRepository,
)
from idleskills.settings import get_settings

if TYPE_CHECKING:
    from idleskills.settings import EngineSettings
    from idleskills.skill import Skill


class GameRuntime:
    """Wires repositories, catalog, training facade and prestige gate for one game."""

    def __init__(
        self,
        definition: GameDefinition,
        settings: EngineSettings | None = None,
        skills: ProgressionRepository | None = None,
        prestige: PrestigeRepository | None = None,
    ) -> None:
        errors = definition.validate()
        if errors:
            raise ValueError(
                "Invalid GameDefinition:\n" + "\n".join(f"  - {e}" for e in errors)
            )

        self.definition = definition
        self.settings = settings or get_settings()
        self.curve = LevelCurve.from_settings(self.settings)
        self.catalog = definition.catalog()
        self.skills = skills or InMemoryProgressionRepository(definition.skills)
        self.prestige = prestige or InMemoryPrestigeRepository()
        self.facade = ProgressionFacade(self.skills, self.catalog, self.curve, self.settings)
        self.gate = PrestigeGate(self.skills, self.prestige, definition.prestige_config())

    # ── Lifecycle ────────────────────────────────────────────────────

    async def start(self) -> None:
        self.facade.start()
        self.gate.start()
        await self.facade.refresh()

    async def close(self) -> None:
        await self.facade.close()
        self.gate.close()

    async def __aenter__(self) -> GameRuntime:
        await self.start()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    # ── Queries ──────────────────────────────────────────────────────

    @property
    def state(self) -> TrainingState:
        return self.facade.state

    @property
    def prestige_state(self) -> Prestige:
        return self.gate.state

    def visible_skills(self) -> list[Skill]:
        """Skills shown at the current prestige level; all skills when no tiers exist."""
        skills = self.facade.state.skills
        if not self.definition.prestige_tiers:
            return list(skills)
        names = set(self.gate.visible_skills(self.gate.state.level))
        return [s for s in skills if s.name in names]

    # ── Actions ──────────────────────────────────────────────────────

    def is_visible(self, skill_name: str) -> bool:
        return any(s.name == skill_name for s in self.visible_skills())

    async def select_skill(self, skill_name: str) -> bool:
        """Train *skill_name*; skills hidden at the current prestige level are refused."""
        if not self.is_visible(skill_name):
            logger.warning(f"{skill_name!r} is not unlocked at prestige {self.gate.state.level}")
            return False
        return await self.facade.select_skill(skill_name)

    async def select_method(self, method_name: str) -> bool:
        skill_name = self.facade.state.active_skill
        if skill_name is None:
            return False
        method = self.definition.get_method(skill_name, method_name)
        if method is None:
            return False
        return await self.facade.select_method(method)

    async def select_best_tool(self, skill_name: str) -> bool:
        return await self.facade.select_best_tool(skill_name)

    async def trigger_prestige(self) -> PrestigeResult:
        """Prestige if eligible, stopping training before skills are reset."""
        return await self.gate.perform_prestige(self.facade.reset_all)
