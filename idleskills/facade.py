from __future__ import annotations

import asyncio
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING

from loguru import logger

from idleskills.catalog import TrainingMethod, best_available, unlocked
from idleskills.events import (
    ProgressEvent,
    SessionEvent,
    SessionFailedEvent,
    SkillUpdatedEvent,
)
from idleskills.session import TrainingSession
from idleskills.stream import StateStream, Subscription

if TYPE_CHECKING:
    from idleskills.catalog import CatalogProvider, Tool
    from idleskills.level_curve import LevelCurve
    from idleskills.repository import ProgressionRepository
    from idleskills.settings import EngineSettings
    from idleskills.skill import Skill


@dataclass(frozen=True)
class TrainingState:
    """Read-only snapshot published to renderers."""

    skills: list[Skill] = field(default_factory=list)
    is_loading: bool = False
    error: str | None = None
    active_skill: str | None = None
    methods: list[TrainingMethod] = field(default_factory=list)
    active_method: TrainingMethod | None = None
    tools: list[Tool] = field(default_factory=list)
    active_tool: Tool | None = None
    has_better_tool: bool = False
    progress: float = 0.0
    xp_per_hour: int = 0

    def skill(self, name: str) -> Skill | None:
        for s in self.skills:
            if s.name == name:
                return s
        return None


class ProgressionFacade:
    """Command surface of the training engine.

    Commands are serialized through one lock. The skill list is mirrored
    from the repository stream only; session events drive progress,
    level-up catalog refreshes and failure reporting.
    """

    def __init__(
        self,
        repository: ProgressionRepository,
        catalog: CatalogProvider,
        curve: LevelCurve,
        settings: EngineSettings | None = None,
        session: TrainingSession | None = None,
    ) -> None:
        self.repository = repository
        self.catalog = catalog
        self.session = session or TrainingSession(repository, curve, settings)
        self.states: StateStream[TrainingState] = StateStream(TrainingState(is_loading=True))

        # Sticky per-skill selections
        self._selected_methods: dict[str, TrainingMethod] = {}
        self._selected_tools: dict[str, Tool] = {}

        self._lock = asyncio.Lock()
        self._subscriptions: list[Subscription] = []

    @property
    def state(self) -> TrainingState:
        return self.states.value

    def selected_method(self, skill_name: str) -> TrainingMethod | None:
        return self._selected_methods.get(skill_name)

    def selected_tool(self, skill_name: str) -> Tool | None:
        return self._selected_tools.get(skill_name)

    # ── Lifecycle ────────────────────────────────────────────────────

    def start(self) -> None:
        if self._subscriptions:
            return
        self._subscriptions = [
            self.session.events.subscribe(self._on_session_event),
            self.repository.observe().subscribe(self._on_skills),
        ]

    async def close(self) -> None:
        await self.session.cancel()
        for sub in self._subscriptions:
            sub.cancel()
        self._subscriptions = []

    async def refresh(self) -> None:
        """Reload the skill list from the repository."""
        self._update(is_loading=True, error=None)
        try:
            skills = await self.repository.get_all()
        except Exception:
            logger.exception("Error loading skills")
            self._update(is_loading=False, error="Failed to load skills.")
            return
        self._update(skills=skills, is_loading=False)

    # ── Commands ─────────────────────────────────────────────────────

    async def select_skill(self, skill_name: str) -> bool:
        """Start training *skill_name* with its sticky or best selection."""
        async with self._lock:
            if self.session.is_training(skill_name):
                return False

            skill = await self.repository.get(skill_name)
            if skill is None:
                logger.warning(f"Cannot train unknown skill {skill_name!r}")
                return False

            await self.session.cancel()

            try:
                methods = unlocked(self.catalog.methods_for(skill_name), skill.level)
                tools = unlocked(self.catalog.tools_for(skill_name), skill.level)
            except Exception:
                logger.exception(f"Error loading catalog for {skill_name}")
                self._update(
                    error=f"Failed to load training data for {skill_name}.",
                    **_IDLE_SELECTION,
                )
                return False

            method = self._selected_methods.get(skill_name) or best_available(
                methods, skill.level
            )
            tool = self._selected_tools.get(skill_name) or best_available(tools, skill.level)
            if method is None:
                method = TrainingMethod.basic(skill_name)

            self._update(
                error=None,
                active_skill=skill_name,
                methods=methods,
                active_method=method,
                tools=tools,
                active_tool=tool,
                has_better_tool=self._has_better_tool(skill_name, skill.level, tool),
                progress=0.0,
                xp_per_hour=method.xp_per_hour(tool),
            )
            await self.session.start(skill, method, tool)
            return True

    async def select_method(self, method: TrainingMethod) -> bool:
        """Switch the active skill to *method*, keeping the equipped tool."""
        async with self._lock:
            state = self.state
            if method == state.active_method:
                return False
            skill_name = state.active_skill
            if skill_name is None:
                logger.warning(f"No active skill to apply {method.name!r} to")
                return False
            if method.skill_name != skill_name or method not in state.methods:
                logger.warning(f"{method.name!r} is not unlocked for {skill_name}")
                return False

            # Stop the old loop before reading so none of its writes are lost
            await self.session.cancel()
            self._selected_methods[skill_name] = method
            self._update(
                active_method=method,
                progress=0.0,
                xp_per_hour=method.xp_per_hour(state.active_tool),
            )

            skill = await self.repository.get(skill_name)
            if skill is not None:
                await self.session.start(skill, method, state.active_tool)
            return True

    async def select_best_tool(self, skill_name: str) -> bool:
        """Equip the best unlocked tool for *skill_name* if it is an upgrade."""
        async with self._lock:
            skill = await self.repository.get(skill_name)
            if skill is None:
                return False

            best = self.catalog.best_tool(skill_name, skill.level)
            is_active = self.state.active_skill == skill_name
            current = self.state.active_tool if is_active else self._selected_tools.get(skill_name)
            if best is None or best == current:
                return False

            self._selected_tools[skill_name] = best
            if not is_active:
                return True

            method = self.state.active_method
            self._update(
                active_tool=best,
                has_better_tool=False,
                xp_per_hour=method.xp_per_hour(best) if method else 0,
            )
            if method is not None and self.session.is_training(skill_name):
                await self.session.cancel()
                self._update(progress=0.0)
                skill = await self.repository.get(skill_name)
                if skill is not None:
                    await self.session.start(skill, method, best)
            return True

    async def reset_all(self) -> None:
        """Stop training and forget every sticky selection."""
        async with self._lock:
            await self.session.cancel()
            self._selected_methods.clear()
            self._selected_tools.clear()
            self._update(error=None, **_IDLE_SELECTION)

    # ── Event handling ───────────────────────────────────────────────

    def _on_skills(self, skills: list[Skill]) -> None:
        self._update(skills=skills, is_loading=False)

    def _on_session_event(self, event: SessionEvent) -> None:
        if event.generation != self.session.generation:
            return
        if isinstance(event, ProgressEvent):
            self._update(progress=event.progress)
        elif isinstance(event, SkillUpdatedEvent):
            if event.leveled_up:
                self._on_level_up(event.skill)
        elif isinstance(event, SessionFailedEvent):
            self._update(error=f"Training {event.skill_name} failed: {event.error}", **_IDLE_SELECTION)

    def _on_level_up(self, skill: Skill) -> None:
        if skill.name != self.state.active_skill:
            return
        logger.info(f"{skill.name} reached level {skill.level}, refreshing unlocks")
        methods = unlocked(self.catalog.methods_for(skill.name), skill.level)
        tools = unlocked(self.catalog.tools_for(skill.name), skill.level)
        self._update(
            methods=methods,
            tools=tools,
            has_better_tool=self._has_better_tool(skill.name, skill.level, self.state.active_tool),
        )

    # ── Helpers ──────────────────────────────────────────────────────

    def _has_better_tool(self, skill_name: str, level: int, tool: Tool | None) -> bool:
        best = self.catalog.best_tool(skill_name, level)
        return best is not None and best != tool

    def _update(self, **changes: object) -> None:
        self.states.publish(replace(self.state, **changes))


_IDLE_SELECTION: dict[str, object] = {
    "active_skill": None,
    "methods": [],
    "active_method": None,
    "tools": [],
    "active_tool": None,
    "has_better_tool": False,
    "progress": 0.0,
    "xp_per_hour": 0,
}
