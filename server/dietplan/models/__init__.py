"""
Plan, chat and parse-outcome models
"""

from .meal_plan import (
    DailySummary,
    DayPlan,
    MacroDistribution,
    Meal,
    MealSummary,
    MultiDayPlan,
    MultiDayPlanDay,
    MultiDayPlanSummary,
    PlanMode,
    StartupData,
)
from .chat import ChatTurn, TranscriptEntry, ValidationResult, StateBridge, AcceptPlanCommand, DayPlanCommand
from .parse_outcome import ExtractionErrorInfo, LenientOutcome, StrictOutcome, NotFoundOutcome, ParseOutcome

__all__ = [
    "DailySummary",
    "DayPlan",
    "MacroDistribution",
    "Meal",
    "MealSummary",
    "MultiDayPlan",
    "MultiDayPlanDay",
    "MultiDayPlanSummary",
    "PlanMode",
    "StartupData",
    "ChatTurn",
    "TranscriptEntry",
    "ValidationResult",
    "StateBridge",
    "AcceptPlanCommand",
    "DayPlanCommand",
    "ExtractionErrorInfo",
    "LenientOutcome",
    "StrictOutcome",
    "NotFoundOutcome",
    "ParseOutcome",
]
