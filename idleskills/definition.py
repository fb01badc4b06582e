from __future__ import annotations

from dataclasses import dataclass, field

from idleskills.catalog import StaticCatalog, Tool, TrainingMethod
from idleskills.prestige import PrestigeConfig, PrestigeLevelConfig


@dataclass
class GameConfig:
    """Top-level game configuration."""

    name: str = "Untitled"


@dataclass
class GameDefinition:
    """Complete static definition of a skill-training game."""

    config: GameConfig = field(default_factory=GameConfig)
    skills: list[str] = field(default_factory=list)
    methods: list[TrainingMethod] = field(default_factory=list)
    tools: list[Tool] = field(default_factory=list)
    prestige_tiers: dict[int, PrestigeLevelConfig] = field(default_factory=dict)

    def catalog(self) -> StaticCatalog:
        return StaticCatalog(methods=list(self.methods), tools=list(self.tools))

    def prestige_config(self) -> PrestigeConfig:
        return PrestigeConfig(self.prestige_tiers)

    def get_method(self, skill_name: str, name: str) -> TrainingMethod | None:
        for m in self.methods:
            if m.skill_name == skill_name and m.name == name:
                return m
        return None

    def get_tool(self, skill_name: str, name: str) -> Tool | None:
        for t in self.tools:
            if t.skill_name == skill_name and t.name == name:
                return t
        return None

    def validate(self) -> list[str]:
        """Check for common definition errors. Returns list of error messages."""
        errors: list[str] = []
        skill_names = set(self.skills)

        # Check for duplicate names
        seen_s: set[str] = set()
        for s in self.skills:
            if s in seen_s:
                errors.append(f"Duplicate skill name: {s!r}")
            seen_s.add(s)

        seen_m: set[tuple[str, str]] = set()
        for m in self.methods:
            key = (m.skill_name, m.name)
            if key in seen_m:
                errors.append(f"Duplicate training method {m.name!r} for {m.skill_name!r}")
            seen_m.add(key)

        seen_t: set[tuple[str, str]] = set()
        for t in self.tools:
            key = (t.skill_name, t.name)
            if key in seen_t:
                errors.append(f"Duplicate tool {t.name!r} for {t.skill_name!r}")
            seen_t.add(key)

        # Check training methods
        for m in self.methods:
            if m.skill_name not in skill_names:
                errors.append(f"Training method {m.name!r} references unknown skill {m.skill_name!r}")
            if m.xp_per_action <= 0:
                errors.append(f"Training method {m.name!r} must grant positive XP per action")
            if m.action_duration_ms <= 0:
                errors.append(f"Training method {m.name!r} must have a positive duration")
            if m.required_level < 1:
                errors.append(f"Training method {m.name!r} has required level below 1")

        # Check tools
        for t in self.tools:
            if t.skill_name not in skill_names:
                errors.append(f"Tool {t.name!r} references unknown skill {t.skill_name!r}")
            if t.efficiency <= 0:
                errors.append(f"Tool {t.name!r} must have positive efficiency")
            if t.required_level < 1:
                errors.append(f"Tool {t.name!r} has required level below 1")

        # Check prestige tiers
        for level, tier in self.prestige_tiers.items():
            if level < 0:
                errors.append(f"Prestige tier {level} must be >= 0")
            for s in tier.visible_skills:
                if s not in skill_names:
                    errors.append(f"Prestige tier {level} shows unknown skill {s!r}")
            for s in tier.required_skills or []:
                if s not in skill_names:
                    errors.append(f"Prestige tier {level} requires unknown skill {s!r}")
            if tier.required_level < 1:
                errors.append(f"Prestige tier {level} has required level below 1")

        return errors
