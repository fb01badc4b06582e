from __future__ import annotations

import asyncio
from enum import Enum, auto
from typing import TYPE_CHECKING

from loguru import logger

from idleskills._types import clamp
from idleskills.events import (
    ProgressEvent,
    SessionEvent,
    SessionFailedEvent,
    SkillUpdatedEvent,
)
from idleskills.repository import award_xp
from idleskills.settings import get_settings
from idleskills.stream import EventStream

if TYPE_CHECKING:
    from idleskills.catalog import Tool, TrainingMethod
    from idleskills.level_curve import LevelCurve
    from idleskills.repository import ProgressionRepository
    from idleskills.settings import EngineSettings
    from idleskills.skill import Skill


class SessionStatus(Enum):
    IDLE = auto()
    RUNNING = auto()


class TrainingSession:
    """Runs the timed-action loop for at most one skill at a time.

    Each ``start`` bumps ``generation``; every event carries the
    generation of the run that emitted it so consumers can drop events
    from a run that has since been replaced.
    """

    def __init__(
        self,
        repository: ProgressionRepository,
        curve: LevelCurve,
        settings: EngineSettings | None = None,
    ) -> None:
        settings = settings or get_settings()
        self.repository = repository
        self.curve = curve
        self.tick_interval = settings.tick_interval_ms / 1000
        self.time_scale = settings.time_scale
        self.events: EventStream[SessionEvent] = EventStream()

        self.generation = 0
        self.skill_name: str | None = None
        self.method: TrainingMethod | None = None
        self.tool: Tool | None = None
        self.progress = 0.0
        self.last_error: str | None = None
        self._task: asyncio.Task[None] | None = None

    # ── Queries ──────────────────────────────────────────────────────

    @property
    def status(self) -> SessionStatus:
        if self._task is not None and not self._task.done():
            return SessionStatus.RUNNING
        return SessionStatus.IDLE

    def is_training(self, skill_name: str) -> bool:
        return self.skill_name == skill_name and self.status is SessionStatus.RUNNING

    # ── Control ──────────────────────────────────────────────────────

    async def start(
        self,
        skill: Skill,
        method: TrainingMethod,
        tool: Tool | None = None,
    ) -> int:
        """Replace any running loop with one training *skill*. Returns the new generation."""
        await self.cancel()

        self.generation += 1
        self.skill_name = skill.name
        self.method = method
        self.tool = tool
        self.progress = 0.0
        self.last_error = None
        logger.debug(f"Starting training for {skill.name} with {method.name}")

        task = asyncio.get_running_loop().create_task(
            self._run(self.generation, skill, method, tool),
            name=f"training:{skill.name}",
        )
        task.add_done_callback(self._on_task_done)
        self._task = task
        return self.generation

    async def cancel(self) -> None:
        """Stop the running loop and wait until it has exited."""
        task = self._task
        self._task = None
        if task is not None and not task.done():
            logger.debug(f"Cancelling training for {self.skill_name}")
            task.cancel()
            if task is not asyncio.current_task():
                await asyncio.wait({task})
        self.skill_name = None
        self.method = None
        self.tool = None
        self.progress = 0.0

    # ── Loop ─────────────────────────────────────────────────────────

    async def _run(
        self,
        generation: int,
        skill: Skill,
        method: TrainingMethod,
        tool: Tool | None,
    ) -> None:
        loop = asyncio.get_running_loop()
        duration = method.action_duration_ms / 1000 / self.time_scale
        xp_gained = method.xp_per_action_with(tool)
        current = skill

        # Any failure, including one raised by an event listener, ends the run
        try:
            while True:
                start = loop.time()
                end = start + duration

                now = start
                while now < end:
                    self._emit_progress(generation, current.name, clamp((now - start) / duration))
                    await asyncio.sleep(min(self.tick_interval, end - now))
                    now = loop.time()
                self._emit_progress(generation, current.name, 1.0)

                updated = await award_xp(self.repository, self.curve, current, xp_gained)
                self.events.publish(
                    SkillUpdatedEvent(
                        generation=generation,
                        previous=current,
                        skill=updated,
                        xp_gained=xp_gained,
                        method=method,
                        tool=tool,
                    )
                )
                current = updated
        except Exception as exc:
            logger.exception(f"Error while training {current.name}")
            self._fail(generation, current.name, str(exc) or type(exc).__name__)

    def _emit_progress(self, generation: int, skill_name: str, progress: float) -> None:
        self.progress = progress
        self.events.publish(ProgressEvent(generation, skill_name, progress))

    def _fail(self, generation: int, skill_name: str, error: str) -> None:
        self.last_error = error
        if generation == self.generation:
            self._task = None
            self.skill_name = None
            self.method = None
            self.tool = None
            self.progress = 0.0
        self.events.publish(SessionFailedEvent(generation, skill_name, error))

    def _on_task_done(self, task: asyncio.Task[None]) -> None:
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.opt(exception=exc).error(f"Training task {task.get_name()} crashed")
