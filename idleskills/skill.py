from __future__ import annotations

from dataclasses import dataclass, replace


@dataclass(frozen=True)
class Skill:
    """Immutable snapshot of one skill's progress."""

    name: str
    level: int = 1
    xp: int = 0

    def with_progress(self, level: int, xp: int) -> Skill:
        return replace(self, level=level, xp=xp)

    def reset(self) -> Skill:
        """Return the skill at its initial level 1 / 0 XP."""
        return replace(self, level=1, xp=0)
