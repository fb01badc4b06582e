"""MCP server wrapping GameRuntime for interactive AI playtesting."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any

from mcp.server.fastmcp import FastMCP

from idleskills.catalog import Tool, TrainingMethod
from idleskills.definition import GameDefinition
from idleskills.prestige import PrestigeLevelConfig
from idleskills.runtime import GameRuntime
from idleskills.settings import EngineSettings

# Maximum seconds per wait() call (10 minutes)
_MAX_WAIT = 600


@dataclass
class _GameHolder:
    """Holds the active game definition and runtime."""

    definition: GameDefinition
    runtime: GameRuntime
    settings: EngineSettings | None = None
    started: bool = False


async def _ensure_started(holder: _GameHolder) -> GameRuntime:
    if not holder.started:
        await holder.runtime.start()
        holder.started = True
    return holder.runtime


def _method_dict(m: TrainingMethod, tool: Tool | None = None) -> dict[str, Any]:
    return {
        "name": m.name,
        "xp_per_action": m.xp_per_action_with(tool),
        "action_duration_ms": m.action_duration_ms,
        "required_level": m.required_level,
        "xp_per_hour": m.xp_per_hour(tool),
    }


def _tool_dict(t: Tool) -> dict[str, Any]:
    return {
        "name": t.name,
        "efficiency": t.efficiency,
        "required_level": t.required_level,
    }


def _describe_requirement(tier: PrestigeLevelConfig) -> str | None:
    req = tier.requirement()
    return req.describe() if req else None


# ── Tool logic functions (testable without MCP protocol) ────────────


def _tool_get_game_info(holder: _GameHolder) -> dict[str, Any]:
    defn = holder.definition
    catalog = defn.catalog()
    return {
        "name": defn.config.name,
        "skills": [
            {
                "name": s,
                "methods": [_method_dict(m) for m in catalog.methods_for(s)],
                "tools": [_tool_dict(t) for t in catalog.tools_for(s)],
            }
            for s in defn.skills
        ],
        "prestige_tiers": [
            {
                "level": level,
                "visible_skills": list(tier.visible_skills),
                "required_skills": list(tier.required_skills or []),
                "required_level": tier.required_level,
                "requirement": _describe_requirement(tier),
            }
            for level, tier in sorted(defn.prestige_tiers.items())
        ],
    }


async def _tool_get_game_state(holder: _GameHolder) -> dict[str, Any]:
    runtime = await _ensure_started(holder)
    state = runtime.state
    curve = runtime.curve
    prestige = runtime.prestige_state
    result: dict[str, Any] = {
        "skills": {
            s.name: {
                "level": s.level,
                "xp": s.xp,
                "xp_to_next": curve.xp_for_next_level(s.level),
            }
            for s in runtime.visible_skills()
        },
        "active_skill": state.active_skill,
        "active_method": state.active_method.name if state.active_method else None,
        "active_tool": state.active_tool.name if state.active_tool else None,
        "methods": [_method_dict(m, state.active_tool) for m in state.methods],
        "tools": [_tool_dict(t) for t in state.tools],
        "has_better_tool": state.has_better_tool,
        "progress": round(state.progress, 3),
        "xp_per_hour": state.xp_per_hour,
        "prestige": {"level": prestige.level, "can_prestige": prestige.can_prestige},
    }
    if state.error:
        result["error"] = state.error
    return result


async def _tool_select_skill(holder: _GameHolder, skill_name: str) -> dict[str, Any]:
    if skill_name not in holder.definition.skills:
        return {"error": f"Unknown skill: {skill_name!r}"}
    runtime = await _ensure_started(holder)
    if not runtime.is_visible(skill_name):
        return {"success": False, "reason": "Skill not unlocked at this prestige level"}

    changed = await runtime.select_skill(skill_name)
    state = runtime.state
    return {
        "success": True,
        "changed": changed,
        "active_skill": state.active_skill,
        "active_method": state.active_method.name if state.active_method else None,
        "active_tool": state.active_tool.name if state.active_tool else None,
    }


async def _tool_select_method(holder: _GameHolder, method_name: str) -> dict[str, Any]:
    runtime = await _ensure_started(holder)
    skill_name = runtime.state.active_skill
    if skill_name is None:
        return {"error": "No skill is being trained"}
    if holder.definition.get_method(skill_name, method_name) is None:
        return {"error": f"Unknown training method for {skill_name}: {method_name!r}"}
    if runtime.state.active_method and runtime.state.active_method.name == method_name:
        return {"success": True, "changed": False, "active_method": method_name}

    if not await runtime.select_method(method_name):
        return {"success": False, "reason": "Training method not unlocked"}
    return {"success": True, "changed": True, "active_method": method_name}


async def _tool_select_best_tool(holder: _GameHolder, skill_name: str) -> dict[str, Any]:
    if skill_name not in holder.definition.skills:
        return {"error": f"Unknown skill: {skill_name!r}"}
    runtime = await _ensure_started(holder)
    changed = await runtime.select_best_tool(skill_name)
    tool = runtime.facade.selected_tool(skill_name)
    return {
        "success": True,
        "changed": changed,
        "tool": tool.name if tool else None,
    }


async def _tool_wait(holder: _GameHolder, seconds: float) -> dict[str, Any]:
    if seconds <= 0:
        return {"error": "Seconds must be positive"}
    if seconds > _MAX_WAIT:
        return {"error": f"Cannot wait more than {_MAX_WAIT} seconds per call"}

    runtime = await _ensure_started(holder)
    before = {s.name: s for s in runtime.state.skills}
    await asyncio.sleep(seconds)

    gained: dict[str, Any] = {}
    for s in runtime.state.skills:
        old = before.get(s.name)
        if old is None or old == s:
            continue
        gained[s.name] = {
            "level": s.level,
            "xp": s.xp,
            "levels_gained": s.level - old.level,
        }
    result: dict[str, Any] = {
        "waited": seconds,
        "progress": round(runtime.state.progress, 3),
        "skills_changed": gained,
    }
    if runtime.state.error:
        result["error"] = runtime.state.error
    return result


async def _tool_prestige(holder: _GameHolder) -> dict[str, Any]:
    runtime = await _ensure_started(holder)
    result = await runtime.trigger_prestige()
    if result.success:
        return {
            "success": True,
            "prestige_level": result.level,
            "skills_reset": result.skills_reset,
        }
    return {"success": False, "reason": result.reason}


async def _tool_new_game(holder: _GameHolder) -> dict[str, Any]:
    if holder.started:
        await holder.runtime.close()
    holder.runtime = GameRuntime(holder.definition, holder.settings)
    holder.started = False
    await _ensure_started(holder)
    return {"success": True, "message": "Game reset to initial state"}


# ── Server factory ──────────────────────────────────────────────────


def create_server(
    definition: GameDefinition,
    settings: EngineSettings | None = None,
) -> FastMCP:
    """Create an MCP server wrapping a GameRuntime for the given definition."""
    holder = _GameHolder(
        definition=definition,
        runtime=GameRuntime(definition, settings),
        settings=settings,
    )

    mcp = FastMCP(
        name=f"IdleSkills: {definition.config.name}",
    )

    @mcp.tool()
    def get_game_info() -> dict[str, Any]:
        """Get static game overview: skills, training methods, tools, prestige tiers."""
        return _tool_get_game_info(holder)

    @mcp.tool()
    async def get_game_state() -> dict[str, Any]:
        """Get current state: skill levels/xp, active training, progress, prestige."""
        return await _tool_get_game_state(holder)

    @mcp.tool()
    async def select_skill(skill_name: str) -> dict[str, Any]:
        """Start training a skill with its remembered or best unlocked method and tool."""
        return await _tool_select_skill(holder, skill_name)

    @mcp.tool()
    async def select_method(method_name: str) -> dict[str, Any]:
        """Switch the active skill to another unlocked training method."""
        return await _tool_select_method(holder, method_name)

    @mcp.tool()
    async def select_best_tool(skill_name: str) -> dict[str, Any]:
        """Equip the best unlocked tool for a skill."""
        return await _tool_select_best_tool(holder, skill_name)

    @mcp.tool()
    async def wait(seconds: float) -> dict[str, Any]:
        """Let training run for the given wall-clock seconds (max 600)."""
        return await _tool_wait(holder, seconds)

    @mcp.tool()
    async def prestige() -> dict[str, Any]:
        """Reset all skills and advance one prestige level, if eligible."""
        return await _tool_prestige(holder)

    @mcp.tool()
    async def new_game() -> dict[str, Any]:
        """Reset the game to initial state."""
        return await _tool_new_game(holder)

    return mcp
