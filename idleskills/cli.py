from __future__ import annotations

import argparse
import asyncio
import importlib
import sys

from loguru import logger

from idleskills.definition import GameDefinition
from idleskills.formatting import format_curve_table, format_text_report
from idleskills.level_curve import LevelCurve
from idleskills.metrics import MetricsCollector
from idleskills.report import TrainingReport, build_report
from idleskills.runtime import GameRuntime
from idleskills.settings import EngineSettings, get_settings


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="idleskills",
        description="IdleSkills: idle skill training CLI",
    )
    sub = parser.add_subparsers(dest="command")

    train = sub.add_parser("train", help="Train a skill for a while and report")
    train.add_argument("game_module", help="Python module with define_game()")
    train.add_argument("--skill", required=True, help="Skill to train")
    train.add_argument("--method", default=None, help="Training method name")
    train.add_argument(
        "--best-tool", action="store_true", help="Equip the best unlocked tool"
    )
    train.add_argument(
        "--seconds", type=float, default=30.0, help="Wall-clock seconds to train"
    )
    train.add_argument(
        "--time-scale",
        type=float,
        default=None,
        help="Speed-up applied to action durations (default: from settings)",
    )

    curve = sub.add_parser("curve", help="Print the XP curve")
    curve.add_argument("--levels", type=int, default=20, help="Levels to show")

    info = sub.add_parser("info", help="Describe a game definition")
    info.add_argument("game_module", help="Python module with define_game()")

    parser.add_argument(
        "--log-level", default=None, help="Log level (default: from settings)"
    )
    return parser


def configure_logging(level: str) -> None:
    logger.remove()
    logger.add(
        sys.stderr,
        level=level.upper(),
        format="<dim>{time:HH:mm:ss}</dim> | <level>{level: <8}</level> | {message}",
    )


def load_game(module_path: str) -> GameDefinition:
    """Import module and call define_game()."""
    mod = importlib.import_module(module_path)
    if not hasattr(mod, "define_game"):
        print(f"Error: module {module_path!r} has no define_game() function")
        sys.exit(1)
    return mod.define_game()


async def run_training(
    definition: GameDefinition,
    skill_name: str,
    seconds: float,
    settings: EngineSettings,
    method_name: str | None = None,
    best_tool: bool = False,
) -> TrainingReport:
    """Train *skill_name* for *seconds* of wall-clock time and report."""
    async with GameRuntime(definition, settings) as runtime:
        collector = MetricsCollector()
        collector.attach(runtime.facade.session)

        if not await runtime.select_skill(skill_name):
            raise ValueError(f"Cannot train skill {skill_name!r}")
        if method_name is not None and not await runtime.select_method(method_name):
            raise ValueError(f"Training method {method_name!r} is not available")
        if best_tool:
            await runtime.select_best_tool(skill_name)

        state = runtime.state
        method = state.active_method
        tool = state.active_tool
        await asyncio.sleep(seconds)
        collector.detach()

        return build_report(
            collector,
            skill_name=skill_name,
            method_name=method.name if method else "",
            tool_name=tool.name if tool else None,
            expected_xp_per_hour=state.xp_per_hour,
            total_time=collector.elapsed(),
        )


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    settings = get_settings()
    if getattr(args, "time_scale", None) is not None:
        settings = settings.model_copy(update={"time_scale": args.time_scale})
    configure_logging(args.log_level or settings.log_level)

    if args.command == "curve":
        print(format_curve_table(LevelCurve.from_settings(settings), args.levels))

    elif args.command == "info":
        definition = load_game(args.game_module)
        print(_describe(definition))

    elif args.command == "train":
        definition = load_game(args.game_module)
        try:
            report = asyncio.run(
                run_training(
                    definition,
                    args.skill,
                    args.seconds,
                    settings,
                    method_name=args.method,
                    best_tool=args.best_tool,
                )
            )
        except ValueError as exc:
            print(f"Error: {exc}")
            sys.exit(1)
        print(format_text_report(report))


def _describe(definition: GameDefinition) -> str:
    lines = [definition.config.name, ""]
    catalog = definition.catalog()
    for skill in definition.skills:
        lines.append(f"{skill}:")
        methods = catalog.methods_for(skill)
        if not methods:
            lines.append("  (basic training only)")
        for m in methods:
            lines.append(
                f"  method {m.name:<16s} lvl {m.required_level:>3}  "
                f"{m.xp_per_action} xp / {m.action_duration_ms} ms  "
                f"({m.xp_per_hour():,} xp/h)"
            )
        for t in catalog.tools_for(skill):
            lines.append(f"  tool   {t.name:<16s} lvl {t.required_level:>3}  x{t.efficiency:g}")
    if definition.prestige_tiers:
        lines.append("")
        lines.append("Prestige tiers:")
        for level, tier in sorted(definition.prestige_tiers.items()):
            req = tier.requirement()
            lines.append(
                f"  {level}: visible {', '.join(tier.visible_skills)}; "
                f"requires {req.describe() if req else 'n/a (no further prestige)'}"
            )
    return "\n".join(lines)
