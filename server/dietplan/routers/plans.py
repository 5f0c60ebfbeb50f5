# dietplan/routers/plans.py
import logging
from typing import List, Optional, Union

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from dietplan import config
from dietplan.interpreter.format_router import route
from dietplan.interpreter.resolver import resolve_current
from dietplan.models.chat import AcceptPlanCommand, ChatTurn, TranscriptEntry, ValidationResult
from dietplan.models.meal_plan import DailySummary, DayPlan, MultiDayPlan, PlanMode, StartupData
from dietplan.models.parse_outcome import LenientOutcome, NotFoundOutcome, StrictOutcome
from dietplan.services.chat_service import ChatService
from dietplan.services.plan_calculations import resolve_daily_summary

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/plans", tags=["Plan Interpreter"])


# ---------- request / response models ----------
class ParseRequest(BaseModel):
    raw_text: str
    mode: PlanMode = PlanMode.SINGLE_DAY


class ConversationRequest(BaseModel):
    turns: List[ChatTurn] = Field(default_factory=list)
    mode: PlanMode = PlanMode.SINGLE_DAY


class CurrentPlanResponse(BaseModel):
    plan: Optional[Union[MultiDayPlan, DayPlan]] = None
    mode: PlanMode


class TranscriptRequest(BaseModel):
    turns: List[ChatTurn] = Field(default_factory=list)


class TranscriptResponse(BaseModel):
    messages: List[TranscriptEntry]


class AcceptRequest(ConversationRequest):
    name: str = Field(..., min_length=1)
    session_id: Optional[str] = None


class MessageCheckRequest(BaseModel):
    content: str = ""


class DailySummaryRequest(BaseModel):
    parsed: Optional[DailySummary] = None
    startup_data: Optional[StartupData] = None


# ---------- routes ----------
@router.post("/parse", response_model=Union[LenientOutcome, StrictOutcome, NotFoundOutcome])
def parse_reply(payload: ParseRequest):
    """Interpret a single assistant reply"""
    try:
        return route(payload.raw_text, payload.mode)
    except Exception as e:
        logger.error(f"Failed to parse reply: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Failed to parse reply: {str(e)}")


@router.post("/current", response_model=CurrentPlanResponse)
def current_plan(payload: ConversationRequest):
    """Current plan for the conversation; plan is null until a valid one appears"""
    try:
        plan = resolve_current(payload.turns, payload.mode)
        return CurrentPlanResponse(plan=plan, mode=payload.mode)
    except Exception as e:
        logger.error(f"Failed to resolve current plan: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Failed to resolve current plan: {str(e)}")


@router.post("/transcript", response_model=TranscriptResponse)
def transcript(payload: TranscriptRequest):
    try:
        return TranscriptResponse(messages=ChatService.render_transcript(payload.turns))
    except Exception as e:
        logger.error(f"Failed to render transcript: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Failed to render transcript: {str(e)}")


@router.post("/accept", response_model=AcceptPlanCommand)
def accept_plan(payload: AcceptRequest):
    """Build the persistence command for the current plan"""
    try:
        command = ChatService.build_accept_command(
            turns=payload.turns,
            mode_hint=payload.mode,
            name=payload.name,
            session_id=payload.session_id,
        )
        if command is None:
            raise HTTPException(status_code=404, detail="No plan found in conversation")
        return command
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to build accept command: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Failed to accept plan: {str(e)}")


@router.post("/validate-message", response_model=ValidationResult)
def validate_message(payload: MessageCheckRequest):
    return ChatService.validate_message(payload.content, config.MAX_CHAT_MESSAGE_LENGTH)


@router.post("/daily-summary", response_model=DailySummary)
def daily_summary(payload: DailySummaryRequest):
    """Parsed daily summary, or one calculated from the startup targets"""
    try:
        return resolve_daily_summary(payload.parsed, payload.startup_data)
    except Exception as e:
        logger.error(f"Failed to resolve daily summary: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Failed to resolve daily summary: {str(e)}")
