# dietplan/interpreter/strict_extractor.py
"""
Strict parser for the JSON plan encoding.

The payload is located (whole message, fenced block, or the first embedded
JSON object), then checked against an ordered list of rules. Validation stops
at the first failing rule and raises exactly one typed error.
"""

import json
import logging
import math
from typing import Any, Callable, Dict, List, NamedTuple, Optional

from dietplan import config
from dietplan.interpreter.errors import (
    EmptyArray,
    InvalidNumber,
    InvalidType,
    MissingField,
    NoStructureFound,
    PlanSyntaxError,
    PlanValidationError,
)
from dietplan.interpreter.json_scan import find_object_regions, load_json_object, strip_code_fence
from dietplan.interpreter.numbers import round_half_away
from dietplan.models.meal_plan import (
    DailySummary,
    DayPlan,
    Meal,
    MealSummary,
    MultiDayPlan,
    MultiDayPlanDay,
    MultiDayPlanSummary,
)

logger = logging.getLogger(__name__)

MEAL_PLAN_KEY = "meal_plan"
MULTI_DAY_PLAN_KEY = "multi_day_plan"

_MISSING = object()


class Rule(NamedTuple):
    path: str
    select: Callable[[Any], Any]
    check: Callable[[Any], bool]
    error: Callable[[str], PlanValidationError]


def _get(obj: Any, *keys: str) -> Any:
    for key in keys:
        if not isinstance(obj, dict) or key not in obj:
            return _MISSING
        obj = obj[key]
    return obj


def _absent(value: Any) -> bool:
    return value is _MISSING or value is None


def _present(value: Any) -> bool:
    return not _absent(value)


def _is_number(value: Any) -> bool:
    if not isinstance(value, (int, float)) or isinstance(value, bool):
        return False
    try:
        return math.isfinite(value)
    except OverflowError:
        # integers too large for a float
        return False


def _positive_number(value: Any) -> bool:
    return _is_number(value) and value > 0


def _non_negative_number(value: Any) -> bool:
    return _is_number(value) and value >= 0


def _optional_non_negative_number(value: Any) -> bool:
    return _absent(value) or _non_negative_number(value)


def _is_list(value: Any) -> bool:
    return isinstance(value, list)


def _non_empty_list(value: Any) -> bool:
    return isinstance(value, list) and len(value) > 0


def _non_empty_string(value: Any) -> bool:
    return isinstance(value, str) and value.strip() != ""


def _optional_string(value: Any) -> bool:
    return _absent(value) or isinstance(value, str)


def _positive(path: str) -> PlanValidationError:
    return InvalidNumber(path, "must be a positive number")


def _non_negative(path: str) -> PlanValidationError:
    return InvalidNumber(path, "must be a non-negative number")


def _string(path: str) -> PlanValidationError:
    return InvalidType(path, "must be a string")


DAY_PLAN_RULES = [
    Rule("meal_plan.daily_summary", lambda plan: _get(plan, "daily_summary"), _present, MissingField),
    Rule("daily_summary.kcal", lambda plan: _get(plan, "daily_summary", "kcal"), _positive_number, _positive),
    Rule("daily_summary.proteins", lambda plan: _get(plan, "daily_summary", "proteins"),
         _optional_non_negative_number, _non_negative),
    Rule("daily_summary.fats", lambda plan: _get(plan, "daily_summary", "fats"),
         _optional_non_negative_number, _non_negative),
    Rule("daily_summary.carbs", lambda plan: _get(plan, "daily_summary", "carbs"),
         _optional_non_negative_number, _non_negative),
    Rule("meal_plan.meals", lambda plan: _get(plan, "meals"), _is_list,
         lambda path: InvalidType(path, "must be an array")),
    Rule("meal_plan.meals", lambda plan: _get(plan, "meals"), _non_empty_list, EmptyArray),
]

MEAL_RULES = [
    Rule("meal.name", lambda meal: _get(meal, "name"), _non_empty_string,
         lambda path: InvalidType(path, "must be a non-empty string")),
    Rule("meal.ingredients", lambda meal: _get(meal, "ingredients"), _optional_string, _string),
    Rule("meal.preparation", lambda meal: _get(meal, "preparation"), _optional_string, _string),
    Rule("meal.summary", lambda meal: _get(meal, "summary"), _present, MissingField),
    Rule("meal.summary.kcal", lambda meal: _get(meal, "summary", "kcal"), _positive_number, _positive),
    Rule("meal.summary.protein", lambda meal: _get(meal, "summary", "protein"), _non_negative_number, _non_negative),
    Rule("meal.summary.fat", lambda meal: _get(meal, "summary", "fat"), _non_negative_number, _non_negative),
    Rule("meal.summary.carb", lambda meal: _get(meal, "summary", "carb"), _non_negative_number, _non_negative),
]

def _summary_field(field: str) -> Callable[[Any], Any]:
    return lambda summary: _get(summary, field)


PLAN_SUMMARY_RULES = [
    Rule(f"multi_day_plan.summary.{field}", _summary_field(field), _optional_non_negative_number, _non_negative)
    for field in ("average_kcal", "average_proteins", "average_fats", "average_carbs")
]


def run_rules(rules: List[Rule], subject: Any, prefix: str = "") -> None:
    """Apply rules in order; raise the error of the first one that fails."""
    for rule in rules:
        if not rule.check(rule.select(subject)):
            raise rule.error(prefix + rule.path)


def _decode_error(error: ValueError) -> str:
    if isinstance(error, json.JSONDecodeError):
        return f"{error.msg} at position {error.pos}"
    return str(error)


def locate_payload(raw_text: Optional[str], expected_key: str) -> Dict[str, Any]:
    """
    Find the JSON object carrying the plan. The whole message is tried first,
    then embedded ``{...}`` regions left to right; an object holding
    ``expected_key`` is preferred over the first object that merely parses.
    """
    text = raw_text or ""
    whole = load_json_object(strip_code_fence(text))
    if whole is not None:
        logger.debug("Parsed the whole message as a JSON object")
        return whole

    regions = find_object_regions(text)
    if not regions:
        opening = text.find("{")
        if opening == -1:
            raise NoStructureFound(expected_key)
        try:
            json.loads(text[opening:])
        except ValueError as e:
            raise PlanSyntaxError(f"Failed to parse JSON: {_decode_error(e)}")
        raise PlanSyntaxError("Failed to parse JSON: unbalanced object")

    first_object = None
    first_error = None
    for start, end in regions:
        try:
            parsed = json.loads(text[start:end])
        except ValueError as e:
            logger.debug(f"Embedded region {start}:{end} is not valid JSON: {e}")
            first_error = first_error or e
            continue
        if not isinstance(parsed, dict):
            continue
        if expected_key in parsed:
            return parsed
        if first_object is None:
            first_object = parsed

    if first_object is not None:
        return first_object
    raise PlanSyntaxError(f"Failed to parse JSON: {_decode_error(first_error)}")


def _text(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""


def _rounded(value: Any) -> int:
    return round_half_away(value) if _is_number(value) else 0


def _validated_day_plan(meal_plan: Any, prefix: str = "") -> DayPlan:
    run_rules(DAY_PLAN_RULES, meal_plan, prefix)
    for index, meal in enumerate(meal_plan["meals"]):
        try:
            run_rules(MEAL_RULES, meal, prefix)
        except PlanValidationError as e:
            e.reason = f"meals[{index}] {e.reason}"
            e.args = (f"{e.path}: {e.reason}",)
            raise

    daily = meal_plan["daily_summary"]
    return DayPlan(
        daily_summary=DailySummary(
            kcal=_rounded(daily["kcal"]),
            proteins=_rounded(daily.get("proteins")),
            fats=_rounded(daily.get("fats")),
            carbs=_rounded(daily.get("carbs")),
        ),
        meals=[
            Meal(
                name=_text(meal["name"]),
                ingredients=_text(meal.get("ingredients")),
                preparation=_text(meal.get("preparation")),
                summary=MealSummary(
                    kcal=_rounded(meal["summary"]["kcal"]),
                    p=_rounded(meal["summary"]["protein"]),
                    f=_rounded(meal["summary"]["fat"]),
                    c=_rounded(meal["summary"]["carb"]),
                ),
            )
            for meal in meal_plan["meals"]
        ],
    )


def extract_strict_day_plan(raw_text: Optional[str]) -> DayPlan:
    """Parse and validate a single-day plan under the ``meal_plan`` key."""
    payload = locate_payload(raw_text, MEAL_PLAN_KEY)
    if _absent(payload.get(MEAL_PLAN_KEY)):
        raise MissingField(MEAL_PLAN_KEY)
    plan = _validated_day_plan(payload[MEAL_PLAN_KEY])
    logger.info(f"Extracted JSON day plan with {len(plan.meals)} meals")
    return plan


def _valid_day_number(value: Any) -> bool:
    return _is_number(value) and float(value).is_integer() and 1 <= value <= config.MAX_PLAN_DAYS


def extract_strict_multi_day_plan(raw_text: Optional[str]) -> MultiDayPlan:
    """Parse and validate a multi-day plan under the ``multi_day_plan`` key."""
    payload = locate_payload(raw_text, MULTI_DAY_PLAN_KEY)
    container = payload.get(MULTI_DAY_PLAN_KEY)
    if _absent(container):
        raise MissingField(MULTI_DAY_PLAN_KEY)

    days_value = _get(container, "days")
    if not _is_list(days_value):
        raise InvalidType("multi_day_plan.days", "must be an array")
    if not days_value:
        raise EmptyArray("multi_day_plan.days")

    days = []
    for index, day in enumerate(days_value):
        prefix = f"multi_day_plan.days[{index}]."
        if not _valid_day_number(_get(day, "day_number")):
            raise InvalidNumber(prefix + "day_number", f"must be a number between 1 and {config.MAX_PLAN_DAYS}")
        if not _optional_string(_get(day, "name")):
            raise _string(prefix + "name")
        if _absent(_get(day, MEAL_PLAN_KEY)):
            raise MissingField(prefix + MEAL_PLAN_KEY)
        days.append(
            MultiDayPlanDay(
                day_number=int(day["day_number"]),
                name=_text(day.get("name")) or None,
                plan_content=_validated_day_plan(day[MEAL_PLAN_KEY], prefix),
            )
        )

    summary_value = _get(container, "summary")
    summary = MultiDayPlanSummary(number_of_days=len(days))
    if _present(summary_value):
        if not isinstance(summary_value, dict):
            raise InvalidType("multi_day_plan.summary", "must be an object")
        run_rules(PLAN_SUMMARY_RULES, summary_value)
        summary = MultiDayPlanSummary(
            number_of_days=len(days),
            average_kcal=_rounded(summary_value.get("average_kcal")),
            average_proteins=_rounded(summary_value.get("average_proteins")),
            average_fats=_rounded(summary_value.get("average_fats")),
            average_carbs=_rounded(summary_value.get("average_carbs")),
        )

    logger.info(f"Extracted JSON multi-day plan with {len(days)} days")
    return MultiDayPlan(days=days, summary=summary)
