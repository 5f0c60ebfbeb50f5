# dietplan/interpreter/tag_extractor.py
"""
Lenient parser for the legacy tag-delimited plan encoding.

Outer blocks (``daily_summary``, ``meals``, ``meal``, ``multi_day_plan``,
``day``) are located by case-sensitive literal search. Inner fields are only
regex-matched inside an already bounded outer span, case-insensitively.
Nothing here raises: every missing piece degrades to zero or an empty string,
and a reply without any meal block becomes a single synthetic meal holding the
whole text.
"""

import logging
import re
from typing import Dict, List, Optional, Sequence, Tuple

from dietplan.interpreter.numbers import coerce_number
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

LEGACY_OUTER_MARKERS = ("<multi_day_plan>", "<day>", "<daily_summary>", "<meals>")

_inner_patterns: Dict[str, "re.Pattern[str]"] = {}


def _inner_pattern(name: str) -> "re.Pattern[str]":
    pattern = _inner_patterns.get(name)
    if pattern is None:
        pattern = re.compile(rf"<{name}>(.*?)</{name}>", re.IGNORECASE | re.DOTALL)
        _inner_patterns[name] = pattern
    return pattern


def has_tag_markers(text: str) -> bool:
    return any(marker in (text or "") for marker in LEGACY_OUTER_MARKERS)


def _find_block(
    text: str, name: str, start: int = 0, stop_markers: Sequence[str] = ()
) -> Optional[Tuple[int, int, int]]:
    """
    Locate the first ``<name>`` block at or after ``start``.

    Returns (content_start, content_end, resume_at). An unclosed block, or one
    whose closing marker only appears after a stop marker, ends at the nearest
    stop marker or at the end of the text.
    """
    open_tag = f"<{name}>"
    close_tag = f"</{name}>"
    open_at = text.find(open_tag, start)
    if open_at == -1:
        return None

    content_start = open_at + len(open_tag)
    limit = len(text)
    for marker in stop_markers:
        position = text.find(marker, content_start)
        if position != -1:
            limit = min(limit, position)

    close_at = text.find(close_tag, content_start)
    if close_at == -1 or close_at > limit:
        return content_start, limit, limit
    return content_start, close_at, close_at + len(close_tag)


def _field(text: str, name: str) -> Optional[str]:
    match = _inner_pattern(name).search(text)
    return match.group(1) if match else None


def _text_field(text: str, name: str) -> str:
    value = _field(text, name)
    return value.strip() if value is not None else ""


def _number_field(text: str, name: str) -> int:
    return coerce_number(_field(text, name))


def _inner_block(text: str, name: str) -> Optional[str]:
    """Case-insensitive inner block; an unclosed one runs to the end of ``text``."""
    opening = re.search(rf"<{name}>", text, re.IGNORECASE)
    if not opening:
        return None
    closing = re.search(rf"</{name}>", text[opening.end():], re.IGNORECASE)
    if not closing:
        return text[opening.end():]
    return text[opening.end():opening.end() + closing.start()]


def _parse_daily_summary(text: str) -> DailySummary:
    block = _find_block(text, "daily_summary", stop_markers=("<meals>", "<daily_summary>"))
    if block is None:
        return DailySummary()
    content = text[block[0]:block[1]]
    return DailySummary(
        kcal=_number_field(content, "kcal"),
        proteins=_number_field(content, "proteins"),
        fats=_number_field(content, "fats"),
        carbs=_number_field(content, "carbs"),
    )


def _parse_meal(content: str) -> Meal:
    summary_text = _inner_block(content, "summary")
    if summary_text is None:
        summary = MealSummary()
    else:
        summary = MealSummary(
            kcal=_number_field(summary_text, "kcal"),
            p=_number_field(summary_text, "protein"),
            f=_number_field(summary_text, "fat"),
            c=_number_field(summary_text, "carb"),
        )
    return Meal(
        name=_text_field(content, "name"),
        ingredients=_text_field(content, "ingredients"),
        preparation=_text_field(content, "preparation"),
        summary=summary,
    )


def _parse_meals(text: str) -> List[Meal]:
    block = _find_block(text, "meals")
    if block is None:
        return []
    meals_text = text[block[0]:block[1]]

    meals = []
    position = 0
    while True:
        meal_block = _find_block(meals_text, "meal", position, stop_markers=("<meal>",))
        if meal_block is None:
            break
        content_start, content_end, position = meal_block
        meals.append(_parse_meal(meals_text[content_start:content_end]))
    return meals


def _fallback_meal(text: str) -> Meal:
    return Meal(name="", ingredients="", preparation=(text or "").strip(), summary=MealSummary())


def extract_tagged_day_plan(raw_text: Optional[str]) -> DayPlan:
    """Parse one day's plan from the tag-delimited encoding. Never raises."""
    text = raw_text or ""
    daily_summary = _parse_daily_summary(text)
    meals = _parse_meals(text)
    if not meals:
        logger.debug("No <meal> blocks found, wrapping the whole reply as a fallback meal")
        meals = [_fallback_meal(text)]
    else:
        logger.debug(f"Parsed {len(meals)} tagged meals")
    return DayPlan(daily_summary=daily_summary, meals=meals)


def _day_header(day_text: str) -> str:
    cut = len(day_text)
    for marker in ("<daily_summary>", "<meals>"):
        position = day_text.find(marker)
        if position != -1:
            cut = min(cut, position)
    return day_text[:cut]


def extract_tagged_multi_day_plan(raw_text: Optional[str]) -> MultiDayPlan:
    """
    Parse the legacy multi-day container. ``<day>`` blocks are read with the
    single-day rules; a day without a usable ``<day_number>`` takes its
    1-based position. Without a ``<multi_day_plan>`` container the whole text
    is scanned for ``<day>`` blocks.
    """
    text = raw_text or ""
    container = _find_block(text, "multi_day_plan")
    body = text[container[0]:container[1]] if container else text

    days = []
    leftovers = []
    position = 0
    while True:
        day_block = _find_block(body, "day", position, stop_markers=("<day>",))
        if day_block is None:
            leftovers.append(body[position:])
            break
        content_start, content_end, resume_at = day_block
        leftovers.append(body[position:content_start - len("<day>")])
        day_text = body[content_start:content_end]
        position = resume_at

        header = _day_header(day_text)
        day_number = _number_field(header, "day_number")
        if day_number <= 0:
            day_number = len(days) + 1
        name = _text_field(header, "name") or None
        days.append(
            MultiDayPlanDay(day_number=day_number, name=name, plan_content=extract_tagged_day_plan(day_text))
        )

    summary = MultiDayPlanSummary(number_of_days=len(days))
    summary_text = _inner_block("".join(leftovers), "summary")
    if summary_text is not None:
        summary = MultiDayPlanSummary(
            number_of_days=_number_field(summary_text, "number_of_days") or len(days),
            average_kcal=_number_field(summary_text, "average_kcal"),
            average_proteins=_number_field(summary_text, "average_proteins"),
            average_fats=_number_field(summary_text, "average_fats"),
            average_carbs=_number_field(summary_text, "average_carbs"),
        )

    logger.debug(f"Parsed {len(days)} tagged day blocks")
    return MultiDayPlan(days=days, summary=summary)
