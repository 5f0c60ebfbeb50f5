# dietplan/services/chat_service.py
import logging
from typing import Iterable, List, Optional, Union

from dietplan import config
from dietplan.interpreter.commentary import extract_commentary
from dietplan.interpreter.display import sanitize_for_display
from dietplan.interpreter.resolver import TurnLike, as_turns, latest_assistant_turn, resolve_current
from dietplan.models.chat import (
    AcceptPlanCommand,
    ChatTurn,
    DayPlanCommand,
    StateBridge,
    TranscriptEntry,
    ValidationResult,
)
from dietplan.models.meal_plan import DayPlan, MultiDayPlan, PlanMode, StartupData

logger = logging.getLogger(__name__)


class ChatService:

    @staticmethod
    def validate_message(text: Optional[str], max_length: Optional[int] = None) -> ValidationResult:
        """Check a user message before it is sent to the model"""
        limit = max_length if max_length is not None else config.MAX_CHAT_MESSAGE_LENGTH
        trimmed = (text or "").strip()

        if not trimmed:
            return ValidationResult(valid=False, error="Message cannot be empty.")
        if len(trimmed) > limit:
            return ValidationResult(valid=False, error="Message too long. Please shorten your message.")
        return ValidationResult(valid=True)

    @staticmethod
    def display_text(turn: ChatTurn) -> str:
        """Text shown in the chat bubble for a single turn"""
        if turn.role == "user":
            return turn.content
        commentary = extract_commentary(turn.content)
        if commentary:
            return commentary
        return sanitize_for_display(turn.content)

    @staticmethod
    def render_transcript(turns: Iterable[TurnLike]) -> List[TranscriptEntry]:
        """One display string per turn, in order"""
        return [
            TranscriptEntry(role=turn.role, display_text=ChatService.display_text(turn))
            for turn in as_turns(turns)
        ]

    @staticmethod
    def create_state_bridge(
        session_id: str,
        turns: Iterable[TurnLike],
        startup_data: Optional[StartupData] = None,
    ) -> Optional[StateBridge]:
        """Hand-off state for the plan editor; None until the assistant has replied"""
        turn = latest_assistant_turn(turns)
        if turn is None:
            return None
        return StateBridge(
            session_id=session_id,
            last_assistant_message=turn.content,
            startup_data=startup_data,
        )

    @staticmethod
    def build_accept_command(
        turns: Iterable[TurnLike],
        mode_hint: Union[PlanMode, str],
        name: str,
        session_id: Optional[str] = None,
    ) -> Optional[AcceptPlanCommand]:
        """Serialize the current plan into the command the accept workflow persists"""
        plan = resolve_current(turns, mode_hint)
        if plan is None:
            logger.info("Accept requested but no plan could be resolved")
            return None

        if isinstance(plan, MultiDayPlan):
            return AcceptPlanCommand(
                name=name,
                source_chat_session_id=session_id,
                mode=PlanMode.MULTI_DAY,
                day_plans=[
                    DayPlanCommand(day_number=day.day_number, name=day.name, plan_content=day.plan_content)
                    for day in plan.days
                ],
                number_of_days=plan.summary.number_of_days,
            )

        day_plan: DayPlan = plan
        return AcceptPlanCommand(
            name=name,
            source_chat_session_id=session_id,
            mode=PlanMode.SINGLE_DAY,
            plan_content=day_plan,
            number_of_days=1,
            daily_summary=day_plan.daily_summary,
        )
