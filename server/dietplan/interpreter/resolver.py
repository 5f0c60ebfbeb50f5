# dietplan/interpreter/resolver.py
"""
Resolve "the current plan" from a whole conversation.

Every call is a pure function of the turn sequence; nothing is cached.
"""

import logging
from typing import Any, Iterable, List, Mapping, Optional, Union

from dietplan.interpreter.format_router import detect_shape, route
from dietplan.models.chat import ChatTurn
from dietplan.models.meal_plan import DayPlan, MultiDayPlan, PlanMode

logger = logging.getLogger(__name__)

TurnLike = Union[ChatTurn, Mapping[str, Any]]


def as_turns(turns: Iterable[TurnLike]) -> List[ChatTurn]:
    """Accept ChatTurn instances or plain ``{"role", "content"}`` mappings."""
    return [turn if isinstance(turn, ChatTurn) else ChatTurn.model_validate(turn) for turn in turns]


def latest_assistant_turn(turns: Iterable[TurnLike]) -> Optional[ChatTurn]:
    for turn in reversed(as_turns(turns)):
        if turn.role == "assistant":
            return turn
    return None


def _latest_multi_day_turn(turns: List[ChatTurn]) -> Optional[ChatTurn]:
    for turn in reversed(turns):
        if turn.role != "assistant":
            continue
        shape = detect_shape(turn.content) or (PlanMode.MULTI_DAY if "<day>" in turn.content else None)
        if shape == PlanMode.MULTI_DAY:
            return turn
    return None


def _plan_from(turn: ChatTurn, mode: PlanMode) -> Optional[Union[DayPlan, MultiDayPlan]]:
    outcome = route(turn.content, mode)
    if outcome.kind == "strict" and outcome.errors:
        error = outcome.errors[0]
        logger.warning(f"Ignoring malformed plan in latest reply: {error.kind} at {error.path}: {error.reason}")
        return None
    if not outcome.has_plan:
        return None
    if isinstance(outcome.plan, MultiDayPlan):
        return outcome.plan.normalized()
    return outcome.plan


def resolve_current(
    turns: Iterable[TurnLike],
    mode_hint: Union[PlanMode, str] = PlanMode.SINGLE_DAY,
) -> Optional[Union[DayPlan, MultiDayPlan]]:
    """
    Return the plan shown in the "current plan" panel, or None.

    Single-day mode reads the latest assistant reply. Multi-day mode reads the
    latest reply carrying a multi-day payload and returns its days deduplicated
    (last occurrence wins) and sorted by day number.
    """
    mode = PlanMode(mode_hint)
    history = as_turns(turns)

    if mode == PlanMode.MULTI_DAY:
        turn = _latest_multi_day_turn(history)
        if turn is None:
            logger.debug("No multi-day reply in conversation yet")
            return None
        plan = _plan_from(turn, PlanMode.MULTI_DAY)
        return plan if isinstance(plan, MultiDayPlan) else None

    turn = latest_assistant_turn(history)
    if turn is None:
        logger.debug("No assistant reply in conversation yet")
        return None
    return _plan_from(turn, PlanMode.SINGLE_DAY)
