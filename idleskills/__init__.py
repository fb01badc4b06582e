# idleskills: idle skill training engine

from idleskills._types import compare, round_half_up
from idleskills.skill import Skill
from idleskills.level_curve import LevelCurve
from idleskills.catalog import (
    CatalogProvider,
    StaticCatalog,
    Tool,
    TrainingMethod,
    best_available,
    unlocked,
)
from idleskills.stream import EventStream, StateStream, Subscription
from idleskills.requirement import Requirement, Req
from idleskills.prestige import (
    Prestige,
    PrestigeConfig,
    PrestigeGate,
    PrestigeLevelConfig,
    PrestigeResult,
)
from idleskills.repository import (
    InMemoryPrestigeRepository,
    InMemoryProgressionRepository,
    PrestigeRepository,
    ProgressionRepository,
    award_xp,
)
from idleskills.events import (
    ProgressEvent,
    SessionEvent,
    SessionFailedEvent,
    SkillUpdatedEvent,
)
from idleskills.session import SessionStatus, TrainingSession
from idleskills.facade import ProgressionFacade, TrainingState
from idleskills.definition import GameConfig, GameDefinition
from idleskills.runtime import GameRuntime
from idleskills.settings import EngineSettings, get_settings
from idleskills.metrics import MetricsCollector
from idleskills.report import TrainingReport, build_report
from idleskills.formatting import format_curve_table, format_text_report

__all__ = [
    # Types
    "compare",
    "round_half_up",
    # Skills and curve
    "Skill",
    "LevelCurve",
    # Catalog
    "CatalogProvider",
    "StaticCatalog",
    "Tool",
    "TrainingMethod",
    "best_available",
    "unlocked",
    # Streams
    "EventStream",
    "StateStream",
    "Subscription",
    # Requirements
    "Requirement",
    "Req",
    # Prestige
    "Prestige",
    "PrestigeConfig",
    "PrestigeGate",
    "PrestigeLevelConfig",
    "PrestigeResult",
    # Repositories
    "InMemoryPrestigeRepository",
    "InMemoryProgressionRepository",
    "PrestigeRepository",
    "ProgressionRepository",
    "award_xp",
    # Training
    "ProgressEvent",
    "SessionEvent",
    "SessionFailedEvent",
    "SkillUpdatedEvent",
    "SessionStatus",
    "TrainingSession",
    "ProgressionFacade",
    "TrainingState",
    # Definition and runtime
    "GameConfig",
    "GameDefinition",
    "GameRuntime",
    # Settings
    "EngineSettings",
    "get_settings",
    # Reporting
    "MetricsCollector",
    "TrainingReport",
    "build_report",
    "format_curve_table",
    "format_text_report",
]
