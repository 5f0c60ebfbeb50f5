# dietplan/models/parse_outcome.py
from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, Field

from dietplan.models.meal_plan import DayPlan, MultiDayPlan, PlanMode

AnyPlan = Union[MultiDayPlan, DayPlan]


class ExtractionErrorInfo(BaseModel):
    kind: str
    path: str
    reason: str


class LenientOutcome(BaseModel):
    """Plan scraped from the tag-delimited encoding."""
    kind: Literal["lenient"] = "lenient"
    shape: PlanMode
    plan: AnyPlan
    fallback: bool = False  # no meal blocks were found

    @property
    def has_plan(self) -> bool:
        return not self.fallback


class StrictOutcome(BaseModel):
    """Result of the JSON encoding; `plan` is None when extraction failed."""
    kind: Literal["strict"] = "strict"
    shape: PlanMode
    plan: Optional[AnyPlan] = None
    errors: List[ExtractionErrorInfo] = Field(default_factory=list)

    @property
    def has_plan(self) -> bool:
        return self.plan is not None and not self.errors


class NotFoundOutcome(BaseModel):
    """No structural markers at all; carries the unstructured fallback plan."""
    kind: Literal["not_found"] = "not_found"
    shape: PlanMode
    plan: DayPlan

    @property
    def has_plan(self) -> bool:
        return False


ParseOutcome = Annotated[
    Union[LenientOutcome, StrictOutcome, NotFoundOutcome],
    Field(discriminator="kind"),
]
