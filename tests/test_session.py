"""Tests for the timed training loop."""
import asyncio

import pytest

from idleskills.catalog import Tool, TrainingMethod
from idleskills.events import ProgressEvent, SessionFailedEvent, SkillUpdatedEvent
from idleskills.level_curve import LevelCurve
from idleskills.repository import InMemoryProgressionRepository
from idleskills.session import SessionStatus, TrainingSession
from idleskills.settings import EngineSettings
from idleskills.skill import Skill

FAST = EngineSettings(tick_interval_ms=5)


def _make_session(*names: str) -> tuple[TrainingSession, InMemoryProgressionRepository]:
    repo = InMemoryProgressionRepository(names or ("Woodcutting", "Mining"))
    return TrainingSession(repo, LevelCurve(), FAST), repo


def _method(skill: str = "Woodcutting", xp: int = 10, ms: int = 20) -> TrainingMethod:
    return TrainingMethod(skill, f"{skill} drill", xp_per_action=xp, action_duration_ms=ms)


async def _collect_until(session: TrainingSession, predicate, timeout: float = 2.0) -> list:
    """Collect session events until *predicate* matches one of them."""
    events: list = []
    done = asyncio.Event()

    def on_event(event) -> None:
        events.append(event)
        if predicate(event):
            done.set()

    sub = session.events.subscribe(on_event)
    try:
        await asyncio.wait_for(done.wait(), timeout)
    finally:
        sub.cancel()
    return events


class _FailingRepository(InMemoryProgressionRepository):
    async def update(self, skill: Skill) -> Skill:
        raise RuntimeError("disk full")


@pytest.mark.asyncio
async def test_action_awards_xp():
    session, repo = _make_session()
    await session.start(await repo.get("Woodcutting"), _method(xp=10))

    events = await _collect_until(session, lambda e: isinstance(e, SkillUpdatedEvent))
    await session.cancel()

    update = events[-1]
    assert update.skill == Skill("Woodcutting", level=2, xp=0)
    assert update.leveled_up
    assert update.xp_gained == 10
    assert (await repo.get("Woodcutting")).level == 2


@pytest.mark.asyncio
async def test_progress_runs_from_zero_to_one():
    session, repo = _make_session()
    await session.start(await repo.get("Woodcutting"), _method(ms=40))

    events = await _collect_until(session, lambda e: isinstance(e, SkillUpdatedEvent))
    await session.cancel()

    progress = [e.progress for e in events if isinstance(e, ProgressEvent)]
    assert progress[0] == 0.0
    assert progress[-1] == 1.0
    assert all(0.0 <= p <= 1.0 for p in progress)
    assert progress == sorted(progress)


@pytest.mark.asyncio
async def test_tool_efficiency_multiplies_xp():
    session, repo = _make_session()
    axe = Tool("Woodcutting", "Adamant Axe", efficiency=1.2, required_level=1)
    await session.start(await repo.get("Woodcutting"), _method(xp=10), axe)

    events = await _collect_until(session, lambda e: isinstance(e, SkillUpdatedEvent))
    await session.cancel()

    assert events[-1].xp_gained == 12
    assert events[-1].tool == axe
    assert await repo.get("Woodcutting") == Skill("Woodcutting", level=2, xp=2)


@pytest.mark.asyncio
async def test_loop_continues_across_actions():
    session, repo = _make_session()
    await session.start(await repo.get("Woodcutting"), _method(xp=1))

    count = 0

    def third_action(event) -> bool:
        nonlocal count
        if isinstance(event, SkillUpdatedEvent):
            count += 1
        return count == 3

    await _collect_until(session, third_action)
    await session.cancel()
    assert (await repo.get("Woodcutting")).xp == 3


@pytest.mark.asyncio
async def test_cancel_stops_training():
    session, repo = _make_session()
    await session.start(await repo.get("Woodcutting"), _method())
    assert session.status is SessionStatus.RUNNING
    assert session.is_training("Woodcutting")

    await session.cancel()

    assert session.status is SessionStatus.IDLE
    assert session.skill_name is None
    assert session.progress == 0.0
    before = await repo.get("Woodcutting")
    await asyncio.sleep(0.08)
    assert await repo.get("Woodcutting") == before


@pytest.mark.asyncio
async def test_switching_skills_stops_previous_loop():
    session, repo = _make_session()
    first = await session.start(await repo.get("Woodcutting"), _method("Woodcutting"))
    await asyncio.sleep(0.01)
    second = await session.start(await repo.get("Mining"), _method("Mining"))
    assert second == first + 1

    events = await _collect_until(session, lambda e: isinstance(e, SkillUpdatedEvent))
    woodcutting = await repo.get("Woodcutting")
    await asyncio.sleep(0.06)
    await session.cancel()

    assert all(e.generation == second for e in events)
    assert all(e.skill_name == "Mining" for e in events if isinstance(e, ProgressEvent))
    assert await repo.get("Woodcutting") == woodcutting
    assert (await repo.get("Mining")).level > 1


@pytest.mark.asyncio
async def test_time_scale_shortens_actions():
    repo = InMemoryProgressionRepository(["Woodcutting"])
    settings = EngineSettings(tick_interval_ms=5, time_scale=100.0)
    session = TrainingSession(repo, LevelCurve(), settings)
    await session.start(await repo.get("Woodcutting"), _method(ms=2000))

    await _collect_until(session, lambda e: isinstance(e, SkillUpdatedEvent), timeout=1.0)
    await session.cancel()


@pytest.mark.asyncio
async def test_repository_failure_ends_session():
    repo = _FailingRepository(["Woodcutting"])
    session = TrainingSession(repo, LevelCurve(), FAST)
    await session.start(await repo.get("Woodcutting"), _method())

    events = await _collect_until(session, lambda e: isinstance(e, SessionFailedEvent))

    failure = events[-1]
    assert failure.skill_name == "Woodcutting"
    assert failure.error == "disk full"
    assert session.last_error == "disk full"
    await asyncio.sleep(0)
    assert session.status is SessionStatus.IDLE
    assert session.skill_name is None


@pytest.mark.asyncio
async def test_listener_failure_ends_session():
    session, repo = _make_session()

    def renderer(event) -> None:
        if isinstance(event, ProgressEvent) and event.progress > 0.0:
            raise RuntimeError("renderer crashed")

    session.events.subscribe(renderer)
    await session.start(await repo.get("Woodcutting"), _method(ms=40))

    events = await _collect_until(session, lambda e: isinstance(e, SessionFailedEvent))

    assert events[-1].error == "renderer crashed"
    assert session.status is SessionStatus.IDLE
    assert session.skill_name is None
