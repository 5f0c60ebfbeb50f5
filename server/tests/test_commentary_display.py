# server/tests/test_commentary_display.py
import json

from dietplan import config
from dietplan.interpreter.commentary import extract_commentary
from dietplan.interpreter.display import sanitize_for_display

MEAL_PLAN = {
    "daily_summary": {"kcal": 2000},
    "meals": [{"name": "Breakfast", "summary": {"kcal": 500, "protein": 25, "fat": 15, "carb": 60}}],
}

TAGGED_REPLY = (
    "Here is your plan.\n"
    "<daily_summary><kcal>2000</kcal></daily_summary>\n"
    "<meals><meal><name>Breakfast</name></meal></meals>\n"
    "<comments>Enjoy!</comments>"
)


class TestExtractCommentary:
    """Commentary lookup across both encodings"""

    def test_multiline_tag_kept_verbatim(self):
        assert extract_commentary("<comments>Line 1\nLine 2</comments>") == "Line 1\nLine 2"

    def test_tag_is_case_insensitive_and_trimmed(self):
        assert extract_commentary("<COMMENTS>  Looks good  </Comments>") == "Looks good"

    def test_absent_is_none(self):
        assert extract_commentary("No commentary here") is None
        assert extract_commentary(None) is None

    def test_empty_tag_is_empty_string(self):
        assert extract_commentary("<comments></comments>") == ""

    def test_first_tag_wins(self):
        assert extract_commentary("<comments>first</comments><comments>second</comments>") == "first"

    def test_json_key(self):
        text = json.dumps({"meal_plan": MEAL_PLAN, "comments": " Balanced day.\nDrink water. "})
        assert extract_commentary(text) == "Balanced day.\nDrink water."

    def test_json_key_in_embedded_object(self):
        text = f"Updated:\n{json.dumps({'meal_plan': MEAL_PLAN, 'comments': 'Less sugar.'})}"
        assert extract_commentary(text) == "Less sugar."

    def test_json_non_string_is_none(self):
        assert extract_commentary(json.dumps({"meal_plan": MEAL_PLAN, "comments": 5})) is None

    def test_json_empty_string(self):
        assert extract_commentary(json.dumps({"comments": ""})) == ""

    def test_tag_beats_json(self):
        text = f"<comments>From tag</comments>\n{json.dumps({'comments': 'From JSON'})}"
        assert extract_commentary(text) == "From tag"


class TestSanitizeForDisplay:
    """Chat bubble text with the plan payload removed"""

    def test_payload_only_gives_fallback(self):
        assert sanitize_for_display(json.dumps({"meal_plan": MEAL_PLAN})) == "plan updated above"

    def test_empty_input_gives_fallback(self):
        assert sanitize_for_display("") == "plan updated above"
        assert sanitize_for_display(None) == "plan updated above"

    def test_fallback_text_is_configurable(self, monkeypatch):
        monkeypatch.setattr(config, "FALLBACK_DISPLAY_TEXT", "See the plan panel.")
        assert sanitize_for_display("<meals></meals>") == "See the plan panel."

    def test_tagged_blocks_removed(self):
        assert sanitize_for_display(TAGGED_REPLY) == "Here is your plan.\n\nEnjoy!"

    def test_whole_json_with_comments(self):
        text = json.dumps({"meal_plan": MEAL_PLAN, "comments": "Balanced day."})
        assert sanitize_for_display(text) == "Balanced day."

    def test_embedded_fenced_json_removed(self):
        text = f"Sure, here it is:\n```json\n{json.dumps({'meal_plan': MEAL_PLAN})}\n```\nLet me know."
        assert sanitize_for_display(text) == "Sure, here it is:\n\nLet me know."

    def test_embedded_json_commentary_prepended(self):
        text = f"{json.dumps({'meal_plan': MEAL_PLAN, 'comments': 'Less sugar today.'})}\nAnything else?"
        assert sanitize_for_display(text) == "Less sugar today.\n\nAnything else?"

    def test_unclosed_block_removed_to_end(self):
        assert sanitize_for_display("Intro text\n<meals><meal><name>X</name>") == "Intro text"

    def test_block_removal_ignores_case(self):
        assert sanitize_for_display("Hi\n<MEALS><meal>x</meal></MEALS>\nBye") == "Hi\n\nBye"

    def test_blank_line_runs_collapse(self):
        assert sanitize_for_display("\n\nA\n\n\n\n\nB\n\n") == "A\n\nB"

    def test_non_plan_braces_kept(self):
        assert sanitize_for_display("Use {braces} wisely") == "Use {braces} wisely"
        assert sanitize_for_display('Config: {"theme": "dark"}') == 'Config: {"theme": "dark"}'


class TestSanitizeLegacyEdgeCases:
    """Day blocks, plan summaries and unclosed containers"""

    def test_bare_day_blocks_removed(self):
        text = (
            "Updated plan.\n"
            "<day><day_number>1</day_number><name>Monday</name>"
            "<daily_summary><kcal>2000</kcal></daily_summary>"
            "<meals><meal><name>Eggs</name></meal></meals></day>"
        )
        assert sanitize_for_display(text) == "Updated plan."

    def test_plan_summary_outside_days_removed(self):
        text = (
            "Week ready.\n"
            "<day><day_number>1</day_number><meals><meal><name>Eggs</name></meal></meals></day>\n"
            "<day><day_number>2</day_number><meals><meal><name>Soup</name></meal></meals></day>\n"
            "<summary><number_of_days>2</number_of_days><average_kcal>1950</average_kcal></summary>\n"
            "<comments>Two days of variety.</comments>"
        )
        assert sanitize_for_display(text) == "Week ready.\n\nTwo days of variety."

    def test_summary_tag_kept_without_day_blocks(self):
        assert sanitize_for_display("Recap: <summary>short</summary>") == "Recap: <summary>short</summary>"

    def test_unclosed_container_keeps_commentary(self):
        text = (
            "<meal_plan><daily_summary><kcal>2000</kcal></daily_summary><meals></meals>\n"
            "<comments>Enjoy it</comments>"
        )
        assert sanitize_for_display(text) == "Enjoy it"

    def test_unclosed_meals_stops_at_commentary(self):
        text = "Intro\n<meals><meal><name>X</name>\n<comments>Tasty</comments>\nBye"
        assert sanitize_for_display(text) == "Intro\nTasty\nBye"

    def test_commentary_inside_closed_block_kept(self):
        text = "<meal_plan><meals></meals><comments>Inside</comments></meal_plan>"
        assert sanitize_for_display(text) == "Inside"
