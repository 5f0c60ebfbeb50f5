# dietplan/models/meal_plan.py
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class PlanMode(str, Enum):
    SINGLE_DAY = "single_day"
    MULTI_DAY = "multi_day"


class DailySummary(BaseModel):
    kcal: int = 0
    proteins: int = 0
    fats: int = 0
    carbs: int = 0


class MealSummary(BaseModel):
    kcal: int = 0
    p: int = 0  # protein (g)
    f: int = 0  # fat (g)
    c: int = 0  # carbohydrates (g)


class Meal(BaseModel):
    name: str = ""
    ingredients: str = ""
    preparation: str = ""
    summary: MealSummary = Field(default_factory=MealSummary)


class DayPlan(BaseModel):
    daily_summary: DailySummary = Field(default_factory=DailySummary)
    meals: List[Meal] = Field(default_factory=list)

    def is_fallback_for(self, raw_text: str) -> bool:
        """True when this plan is the synthetic single-meal wrapper around unstructured text."""
        if len(self.meals) != 1:
            return False
        meal = self.meals[0]
        return meal.name == "" and meal.ingredients == "" and meal.preparation == (raw_text or "").strip()


class MultiDayPlanDay(BaseModel):
    day_number: int
    name: Optional[str] = None
    plan_content: DayPlan


class MultiDayPlanSummary(BaseModel):
    number_of_days: int = 0
    average_kcal: int = 0
    average_proteins: int = 0
    average_fats: int = 0
    average_carbs: int = 0


class MultiDayPlan(BaseModel):
    days: List[MultiDayPlanDay]
    summary: MultiDayPlanSummary = Field(default_factory=MultiDayPlanSummary)

    def normalized(self) -> "MultiDayPlan":
        """
        Deduplicate days by day_number (last occurrence wins), sort ascending and
        recount number_of_days. Averages are kept from the source summary.
        """
        by_number: Dict[int, MultiDayPlanDay] = {}
        for day in self.days:
            by_number[day.day_number] = day
        days = [by_number[number] for number in sorted(by_number)]
        summary = self.summary.model_copy(update={"number_of_days": len(days)})
        return MultiDayPlan(days=days, summary=summary)


class MacroDistribution(BaseModel):
    p_perc: float = Field(..., ge=0, le=100)
    f_perc: float = Field(..., ge=0, le=100)
    c_perc: float = Field(..., ge=0, le=100)


class StartupData(BaseModel):
    """Parameters entered when a planning conversation was started."""
    patient_age: Optional[int] = Field(default=None, gt=0)
    patient_weight: Optional[float] = Field(default=None, gt=0)
    patient_height: Optional[float] = Field(default=None, gt=0)
    activity_level: Optional[str] = None  # sedentary, light, moderate, high
    target_kcal: Optional[int] = Field(default=None, gt=0)
    target_macro_distribution: Optional[MacroDistribution] = None
    meal_names: Optional[str] = None
    exclusions_guidelines: Optional[str] = None
    number_of_days: Optional[int] = Field(default=None, ge=1)

    @property
    def mode(self) -> PlanMode:
        if self.number_of_days and self.number_of_days > 1:
            return PlanMode.MULTI_DAY
        return PlanMode.SINGLE_DAY
