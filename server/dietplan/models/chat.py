# dietplan/models/chat.py
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from dietplan.models.meal_plan import DailySummary, DayPlan, PlanMode, StartupData


class ChatTurn(BaseModel):
    model_config = ConfigDict(frozen=True)

    role: Literal["user", "assistant"]
    content: str


class TranscriptEntry(BaseModel):
    role: Literal["user", "assistant"]
    display_text: str


class ValidationResult(BaseModel):
    valid: bool
    error: Optional[str] = None


class StateBridge(BaseModel):
    """Hand-off payload passed from the chat view to the plan editor on accept."""
    session_id: str
    last_assistant_message: str
    startup_data: Optional[StartupData] = None


class DayPlanCommand(BaseModel):
    day_number: int
    name: Optional[str] = None
    plan_content: DayPlan


class AcceptPlanCommand(BaseModel):
    name: str
    source_chat_session_id: Optional[str] = None
    mode: PlanMode
    plan_content: Optional[DayPlan] = None  # single-day plans
    day_plans: List[DayPlanCommand] = Field(default_factory=list)  # multi-day plans
    number_of_days: int = 1
    daily_summary: Optional[DailySummary] = None
