# server/tests/test_format_router.py
import json

from dietplan.interpreter.format_router import detect_encoding, detect_shape, route
from dietplan.models.meal_plan import DayPlan, MultiDayPlan, PlanMode
from dietplan.models.parse_outcome import LenientOutcome, NotFoundOutcome, StrictOutcome

MEAL_PLAN = {
    "daily_summary": {"kcal": 2000, "proteins": 150, "fats": 65, "carbs": 250},
    "meals": [{"name": "Breakfast", "summary": {"kcal": 500, "protein": 25, "fat": 15, "carb": 60}}],
}

STRICT_SINGLE = json.dumps({"meal_plan": MEAL_PLAN, "comments": "Here you go."})
STRICT_MULTI = json.dumps({"multi_day_plan": {"days": [{"day_number": 1, "meal_plan": MEAL_PLAN}]}})
TAGGED_SINGLE = (
    "<daily_summary><kcal>2000</kcal></daily_summary>"
    "<meals><meal><name>Breakfast</name></meal></meals>"
)
BARE_DAYS = (
    "<day><day_number>2</day_number><daily_summary><kcal>1900</kcal></daily_summary>"
    "<meals><meal><name>Soup</name></meal></meals></day>"
    "<day><day_number>1</day_number><daily_summary><kcal>2000</kcal></daily_summary>"
    "<meals><meal><name>Eggs</name></meal></meals></day>"
)


class TestSignatureSniffing:
    """Encoding and shape come from the message itself"""

    def test_encodings(self):
        assert detect_encoding(STRICT_SINGLE) == "strict"
        assert detect_encoding(STRICT_MULTI) == "strict"
        assert detect_encoding(TAGGED_SINGLE) == "lenient"
        assert detect_encoding(BARE_DAYS) == "lenient"
        assert detect_encoding("Just chatting") is None

    def test_shapes(self):
        assert detect_shape(STRICT_MULTI) == PlanMode.MULTI_DAY
        assert detect_shape("<multi_day_plan></multi_day_plan>") == PlanMode.MULTI_DAY
        assert detect_shape(STRICT_SINGLE) == PlanMode.SINGLE_DAY
        assert detect_shape(TAGGED_SINGLE) == PlanMode.SINGLE_DAY
        assert detect_shape(BARE_DAYS) is None
        assert detect_shape("Just chatting") is None


class TestRoute:
    """Routing replies to the right extractor"""

    def test_strict_single_day(self):
        outcome = route(STRICT_SINGLE, PlanMode.SINGLE_DAY)

        assert isinstance(outcome, StrictOutcome)
        assert outcome.shape == PlanMode.SINGLE_DAY
        assert isinstance(outcome.plan, DayPlan)
        assert outcome.has_plan
        assert outcome.errors == []

    def test_structure_beats_hint(self):
        outcome = route(STRICT_MULTI, PlanMode.SINGLE_DAY)

        assert outcome.shape == PlanMode.MULTI_DAY
        assert isinstance(outcome.plan, MultiDayPlan)

        tagged = route(TAGGED_SINGLE, PlanMode.MULTI_DAY)
        assert tagged.shape == PlanMode.SINGLE_DAY
        assert isinstance(tagged.plan, DayPlan)

    def test_strict_errors_are_captured(self):
        broken = json.dumps({"meal_plan": {"daily_summary": {"kcal": 2000}, "meals": []}})
        outcome = route(broken, PlanMode.SINGLE_DAY)

        assert isinstance(outcome, StrictOutcome)
        assert outcome.plan is None
        assert not outcome.has_plan
        assert outcome.errors[0].kind == "empty_array"
        assert outcome.errors[0].path == "meal_plan.meals"

    def test_strict_syntax_error_is_captured(self):
        outcome = route('Here: {"meal_plan": {"daily_summary": ', PlanMode.SINGLE_DAY)

        assert isinstance(outcome, StrictOutcome)
        assert outcome.errors[0].kind == "syntax_error"

    def test_strict_wins_over_tags(self):
        text = f"<comments>Updated</comments>\n<meals></meals>\n{STRICT_SINGLE}"
        assert isinstance(route(text, PlanMode.SINGLE_DAY), StrictOutcome)

    def test_tagged_single_day(self):
        outcome = route(TAGGED_SINGLE, PlanMode.SINGLE_DAY)

        assert isinstance(outcome, LenientOutcome)
        assert not outcome.fallback
        assert outcome.has_plan
        assert outcome.plan.meals[0].name == "Breakfast"

    def test_tagged_empty_meals_is_fallback(self):
        outcome = route("<meals></meals>", PlanMode.SINGLE_DAY)

        assert isinstance(outcome, LenientOutcome)
        assert outcome.fallback
        assert not outcome.has_plan

    def test_bare_days_under_multi_day_hint(self):
        outcome = route(BARE_DAYS, PlanMode.MULTI_DAY)

        assert isinstance(outcome, LenientOutcome)
        assert outcome.shape == PlanMode.MULTI_DAY
        assert [day.day_number for day in outcome.plan.days] == [2, 1]

    def test_bare_days_under_single_day_hint(self):
        outcome = route(BARE_DAYS, PlanMode.SINGLE_DAY)

        assert outcome.shape == PlanMode.SINGLE_DAY
        assert isinstance(outcome.plan, DayPlan)

    def test_tagged_multi_day_container(self):
        text = f"<multi_day_plan>{BARE_DAYS}</multi_day_plan>"
        outcome = route(text, PlanMode.SINGLE_DAY)

        assert outcome.shape == PlanMode.MULTI_DAY
        assert len(outcome.plan.days) == 2

    def test_prose_is_not_found(self):
        text = "Could you tell me about any allergies?"
        outcome = route(text, "multi_day")

        assert isinstance(outcome, NotFoundOutcome)
        assert outcome.shape == PlanMode.MULTI_DAY
        assert not outcome.has_plan
        assert outcome.plan.meals[0].preparation == text

    def test_outcome_serializes_with_kind(self):
        assert route("hello").model_dump()["kind"] == "not_found"
        assert route(STRICT_SINGLE).model_dump()["kind"] == "strict"


class TestMalformedNumbers:
    """Oversized numbers end up as captured errors"""

    def test_huge_integer_is_invalid_number(self):
        text = '{"meal_plan": {"daily_summary": {"kcal": 1' + "0" * 400 + '}, "meals": []}}'
        outcome = route(text, PlanMode.SINGLE_DAY)

        assert isinstance(outcome, StrictOutcome)
        assert outcome.errors[0].kind == "invalid_number"
        assert outcome.errors[0].path == "daily_summary.kcal"

    def test_integer_beyond_digit_limit(self):
        text = 'Here: {"meal_plan": {"daily_summary": {"kcal": ' + "9" * 5000 + "}}} end"
        outcome = route(text, PlanMode.SINGLE_DAY)

        assert isinstance(outcome, StrictOutcome)
        assert outcome.plan is None
        assert outcome.errors[0].kind in ("syntax_error", "invalid_number")
