from __future__ import annotations

from dataclasses import dataclass, field

from idleskills.metrics import (
    ActionRecord,
    FailureRecord,
    LevelUpRecord,
    MetricsCollector,
)


@dataclass
class TrainingReport:
    """Container for a training run's records and derived metrics."""

    skill_name: str = ""
    method_name: str = ""
    tool_name: str | None = None
    total_time: float = 0.0
    final_level: int = 1
    final_xp: int = 0

    # Raw records
    actions: list[ActionRecord] = field(default_factory=list)
    level_ups: list[LevelUpRecord] = field(default_factory=list)
    failures: list[FailureRecord] = field(default_factory=list)

    # Derived metrics
    total_xp: int = 0
    observed_xp_per_hour: float = 0.0
    expected_xp_per_hour: int = 0

    def level_up_time(self, level: int) -> float | None:
        for lu in self.level_ups:
            if lu.level >= level:
                return lu.time
        return None


def build_report(
    collector: MetricsCollector,
    skill_name: str,
    method_name: str,
    tool_name: str | None,
    expected_xp_per_hour: int,
    total_time: float,
) -> TrainingReport:
    """Build a TrainingReport from collected metrics."""
    actions = [a for a in collector.actions if a.skill_name == skill_name]
    total_xp = sum(a.xp_gained for a in actions)
    observed = (total_xp / total_time * 3600.0) if total_time > 0 else 0.0

    final_level, final_xp = 1, 0
    if actions:
        final_level, final_xp = actions[-1].level, actions[-1].xp

    return TrainingReport(
        skill_name=skill_name,
        method_name=method_name,
        tool_name=tool_name,
        total_time=total_time,
        final_level=final_level,
        final_xp=final_xp,
        actions=actions,
        level_ups=[lu for lu in collector.level_ups if lu.skill_name == skill_name],
        failures=list(collector.failures),
        total_xp=total_xp,
        observed_xp_per_hour=observed,
        expected_xp_per_hour=expected_xp_per_hour,
    )
