"""
Interpreter for plan-carrying assistant replies.

Two encodings are understood: the legacy tag-delimited one (parsed leniently)
and the JSON one (validated strictly).
"""

from dietplan.interpreter.commentary import extract_commentary
from dietplan.interpreter.display import sanitize_for_display
from dietplan.interpreter.errors import (
    EmptyArray,
    InvalidNumber,
    InvalidType,
    MissingField,
    NoStructureFound,
    PlanExtractionError,
    PlanSyntaxError,
    PlanValidationError,
)
from dietplan.interpreter.format_router import route
from dietplan.interpreter.numbers import coerce_number
from dietplan.interpreter.resolver import resolve_current
from dietplan.interpreter.strict_extractor import extract_strict_day_plan, extract_strict_multi_day_plan
from dietplan.interpreter.tag_extractor import extract_tagged_day_plan, extract_tagged_multi_day_plan

__all__ = [
    "coerce_number",
    "extract_tagged_day_plan",
    "extract_tagged_multi_day_plan",
    "extract_strict_day_plan",
    "extract_strict_multi_day_plan",
    "route",
    "extract_commentary",
    "sanitize_for_display",
    "resolve_current",
    "PlanExtractionError",
    "PlanSyntaxError",
    "NoStructureFound",
    "PlanValidationError",
    "MissingField",
    "InvalidType",
    "InvalidNumber",
    "EmptyArray",
]
