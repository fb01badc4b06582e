from __future__ import annotations

from typing import TYPE_CHECKING

from idleskills.report import TrainingReport

if TYPE_CHECKING:
    from idleskills.level_curve import LevelCurve


def format_text_report(report: TrainingReport) -> str:
    """Format a training report for console output."""
    lines: list[str] = []

    lines.append("=" * 30 + " IdleSkills Training Report " + "=" * 30)
    lines.append(f"Skill: {report.skill_name}")
    tool = report.tool_name or "none"
    lines.append(f"Method: {report.method_name} (tool: {tool})")
    lines.append(f"Duration: {report.total_time:.1f}s")
    lines.append(f"Result: level {report.final_level}, {report.final_xp} xp")
    lines.append("")

    # Level-ups
    if report.level_ups:
        lines.append("LEVEL-UPS:")
        for lu in report.level_ups:
            label = f"level {lu.level}"
            if lu.levels_gained > 1:
                label += f" (+{lu.levels_gained})"
            lines.append(f"  * {label:.<30s} {lu.time:.1f}s")
        lines.append("")

    # Experience summary
    lines.append("EXPERIENCE:")
    lines.append(f"  Actions: {len(report.actions)}")
    lines.append(f"  Total XP: {report.total_xp}")
    lines.append(f"  Observed: {report.observed_xp_per_hour:,.0f} xp/h")
    lines.append(f"  Expected: {report.expected_xp_per_hour:,} xp/h")

    if report.failures:
        lines.append("")
        lines.append("FAILURES:")
        for f in report.failures:
            lines.append(f"  [FAIL] {f.skill_name} at {f.time:.1f}s: {f.error}")

    return "\n".join(lines)


def format_curve_table(curve: LevelCurve, max_level: int) -> str:
    """Per-level XP requirements and cumulative totals."""
    lines = [f"{'Level':>5}  {'To next':>10}  {'Total':>12}"]
    for level in range(1, max_level + 1):
        lines.append(
            f"{level:>5}  {curve.xp_for_next_level(level):>10,}  "
            f"{curve.total_xp_for_level(level):>12,}"
        )
    return "\n".join(lines)
