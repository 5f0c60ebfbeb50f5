# dietplan/interpreter/format_router.py
import logging
import re
from typing import Optional, Union

from dietplan.interpreter.errors import PlanExtractionError
from dietplan.interpreter.strict_extractor import extract_strict_day_plan, extract_strict_multi_day_plan
from dietplan.interpreter.tag_extractor import (
    extract_tagged_day_plan,
    extract_tagged_multi_day_plan,
    has_tag_markers,
)
from dietplan.models.meal_plan import PlanMode
from dietplan.models.parse_outcome import LenientOutcome, NotFoundOutcome, ParseOutcome, StrictOutcome

logger = logging.getLogger(__name__)

STRICT = "strict"
LENIENT = "lenient"

_MULTI_DAY_KEY = re.compile(r'"multi_day_plan"\s*:')
_MEAL_PLAN_KEY = re.compile(r'"meal_plan"\s*:')


def detect_encoding(raw_text: Optional[str]) -> Optional[str]:
    """'strict' for the JSON plan keys, 'lenient' for legacy tags, None for plain prose."""
    text = raw_text or ""
    if _MULTI_DAY_KEY.search(text) or _MEAL_PLAN_KEY.search(text):
        return STRICT
    if has_tag_markers(text):
        return LENIENT
    return None


def detect_shape(raw_text: Optional[str]) -> Optional[PlanMode]:
    """Shape implied by structure alone, or None when the message is inconclusive."""
    text = raw_text or ""
    if _MULTI_DAY_KEY.search(text) or "<multi_day_plan>" in text:
        return PlanMode.MULTI_DAY
    if _MEAL_PLAN_KEY.search(text):
        return PlanMode.SINGLE_DAY
    if "<day>" in text:
        return None
    if "<daily_summary>" in text or "<meals>" in text:
        return PlanMode.SINGLE_DAY
    return None


def _strict_outcome(raw_text: str, shape: PlanMode) -> StrictOutcome:
    extract = extract_strict_multi_day_plan if shape == PlanMode.MULTI_DAY else extract_strict_day_plan
    try:
        return StrictOutcome(shape=shape, plan=extract(raw_text))
    except PlanExtractionError as e:
        logger.debug(f"Strict extraction failed ({e.kind}): {e}")
        return StrictOutcome(shape=shape, errors=[e.to_info()])


def _lenient_outcome(raw_text: str, shape: PlanMode) -> LenientOutcome:
    if shape == PlanMode.MULTI_DAY:
        plan = extract_tagged_multi_day_plan(raw_text)
        return LenientOutcome(shape=shape, plan=plan, fallback=not plan.days)
    plan = extract_tagged_day_plan(raw_text)
    return LenientOutcome(shape=shape, plan=plan, fallback=plan.is_fallback_for(raw_text))


def route(raw_text: Optional[str], mode_hint: Union[PlanMode, str] = PlanMode.SINGLE_DAY) -> ParseOutcome:
    """
    Pick the extractor for one assistant reply and wrap its result.

    The encoding is chosen from the message alone. The single/multi-day shape
    comes from structure when it is conclusive; ``mode_hint`` only settles
    messages whose structure does not say. Strict extraction errors are
    captured in the outcome, never raised.
    """
    text = raw_text or ""
    hint = PlanMode(mode_hint)
    encoding = detect_encoding(text)
    shape = detect_shape(text) or hint

    if encoding == STRICT:
        logger.info(f"Routing reply to strict JSON extractor ({shape.value})")
        return _strict_outcome(text, shape)
    if encoding == LENIENT:
        logger.info(f"Routing reply to tag extractor ({shape.value})")
        return _lenient_outcome(text, shape)

    logger.debug("No plan markers found in reply")
    return NotFoundOutcome(shape=hint, plan=extract_tagged_day_plan(text))
