"""Woodcutting example game: three trees, seven axes, two prestige tiers."""
from __future__ import annotations

from idleskills.catalog import Tool, TrainingMethod
from idleskills.definition import GameConfig, GameDefinition
from idleskills.prestige import PrestigeLevelConfig

SKILLS = ["Woodcutting", "Firemaking", "Mining", "Smithing", "Fishing", "Cooking"]


def define_game() -> GameDefinition:
    return GameDefinition(
        config=GameConfig(name="Woodcutting Example"),
        skills=list(SKILLS),
        methods=[
            TrainingMethod("Woodcutting", "Tree", xp_per_action=10, action_duration_ms=10_000),
            TrainingMethod(
                "Woodcutting", "Oak Tree", xp_per_action=15, action_duration_ms=10_000,
                required_level=5,
            ),
            TrainingMethod(
                "Woodcutting", "Willow Tree", xp_per_action=30, action_duration_ms=15_000,
                required_level=20,
            ),
        ],
        tools=[
            Tool("Woodcutting", "Bronze Axe", efficiency=1.0, required_level=1),
            Tool("Woodcutting", "Iron Axe", efficiency=1.05, required_level=5),
            Tool("Woodcutting", "Steel Axe", efficiency=1.1, required_level=15),
            Tool("Woodcutting", "Mithril Axe", efficiency=1.15, required_level=25),
            Tool("Woodcutting", "Adamant Axe", efficiency=1.2, required_level=40),
            Tool("Woodcutting", "Rune Axe", efficiency=1.13, required_level=60),
            Tool("Woodcutting", "Dragon Axe", efficiency=1.5, required_level=80),
        ],
        prestige_tiers={
            # Prestige 0 -> 1: level 99 in Woodcutting, Mining and Fishing
            0: PrestigeLevelConfig(visible_skills=["Woodcutting", "Mining", "Fishing"]),
            1: PrestigeLevelConfig(visible_skills=list(SKILLS)),
        },
    )
