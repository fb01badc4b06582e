from __future__ import annotations

import math
from typing import TYPE_CHECKING

from idleskills.skill import Skill

if TYPE_CHECKING:
    from idleskills.settings import EngineSettings

DEFAULT_BASE_XP = 10
DEFAULT_SCALING_FACTOR = 1.1


class LevelCurve:
    """Exponential XP curve: requirement = floor(base_xp * scaling_factor^(level - 1))."""

    def __init__(
        self,
        base_xp: int = DEFAULT_BASE_XP,
        scaling_factor: float = DEFAULT_SCALING_FACTOR,
    ) -> None:
        if base_xp <= 0:
            raise ValueError(f"base_xp must be positive, got {base_xp}")
        if scaling_factor < 1.0:
            raise ValueError(f"scaling_factor must be >= 1.0, got {scaling_factor}")
        self.base_xp = base_xp
        self.scaling_factor = scaling_factor

    @classmethod
    def from_settings(cls, settings: EngineSettings) -> LevelCurve:
        return cls(settings.base_xp, settings.scaling_factor)

    def xp_for_next_level(self, level: int) -> int:
        """XP needed to advance from *level* to *level + 1*."""
        if level < 1:
            raise ValueError(f"Level must be >= 1, got {level}")
        return math.floor(self.base_xp * self.scaling_factor ** (level - 1))

    def apply_xp(self, skill: Skill, xp_delta: int) -> Skill:
        """Add *xp_delta* and resolve every level-up it triggers.

        Surplus XP beyond the last crossed threshold is kept. When no
        threshold is crossed the skill comes back with only its XP raised
        (or unchanged for a zero delta).
        """
        if xp_delta < 0:
            raise ValueError(f"xp_delta must be non-negative, got {xp_delta}")
        if xp_delta == 0 and skill.xp < self.xp_for_next_level(skill.level):
            return skill

        level = skill.level
        xp = skill.xp + xp_delta
        while True:
            required = self.xp_for_next_level(level)
            if xp < required:
                break
            xp -= required
            level += 1

        return skill.with_progress(level=level, xp=xp)

    def total_xp_for_level(self, target_level: int) -> int:
        """Cumulative XP to reach *target_level* from level 1."""
        return sum(self.xp_for_next_level(lvl) for lvl in range(1, target_level))

    def progress_fraction(self, skill: Skill) -> float:
        """Fraction of the way from the current level to the next."""
        return skill.xp / self.xp_for_next_level(skill.level)
