# dietplan/services/plan_calculations.py
from typing import Optional

from dietplan.interpreter.numbers import round_half_away
from dietplan.models.meal_plan import DailySummary, MacroDistribution, StartupData

KCAL_PER_GRAM_PROTEIN = 4
KCAL_PER_GRAM_FAT = 9
KCAL_PER_GRAM_CARBS = 4


def calculate_daily_summary_from_targets(
    target_kcal: Optional[int],
    macro_distribution: Optional[MacroDistribution],
) -> DailySummary:
    """Daily totals implied by the calorie target and macro percentages."""
    if not target_kcal or macro_distribution is None:
        return DailySummary()

    return DailySummary(
        kcal=target_kcal,
        proteins=round_half_away(target_kcal * macro_distribution.p_perc / 100 / KCAL_PER_GRAM_PROTEIN),
        fats=round_half_away(target_kcal * macro_distribution.f_perc / 100 / KCAL_PER_GRAM_FAT),
        carbs=round_half_away(target_kcal * macro_distribution.c_perc / 100 / KCAL_PER_GRAM_CARBS),
    )


def resolve_daily_summary(
    parsed: Optional[DailySummary],
    startup_data: Optional[StartupData],
) -> DailySummary:
    """Prefer the summary the model produced; fall back to the startup targets."""
    if parsed is not None and parsed.kcal > 0:
        return parsed
    if startup_data is None:
        return DailySummary()
    return calculate_daily_summary_from_targets(startup_data.target_kcal, startup_data.target_macro_distribution)
