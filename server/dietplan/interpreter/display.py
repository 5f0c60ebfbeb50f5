# dietplan/interpreter/display.py
import logging
import re
from typing import Optional

from dietplan import config
from dietplan.interpreter.commentary import COMMENTS_KEY, json_commentary
from dietplan.interpreter.json_scan import iter_json_objects, load_json_object, strip_code_fence
from dietplan.interpreter.strict_extractor import MEAL_PLAN_KEY, MULTI_DAY_PLAN_KEY

logger = logging.getLogger(__name__)

PAYLOAD_KEYS = (MULTI_DAY_PLAN_KEY, MEAL_PLAN_KEY, COMMENTS_KEY)
PAYLOAD_BLOCKS = ("multi_day_plan", "meal_plan", "day", "daily_summary", "meals")

_EMPTY_FENCE = re.compile(r"```[a-zA-Z]*\s*```")
_COMMENTS_BLOCK = re.compile(r"<comments>.*?</comments>", re.IGNORECASE | re.DOTALL)
_COMMENTS_WRAPPER = re.compile(r"</?comments>", re.IGNORECASE)
_BLANK_RUNS = re.compile(r"\n\s*\n(\s*\n)+")
_BLOCK_STOP = re.compile(r"<(?:comments|" + "|".join(PAYLOAD_BLOCKS) + r")>", re.IGNORECASE)
_MULTI_DAY_MARKER = re.compile(r"<(?:multi_day_plan|day)>", re.IGNORECASE)


def _remove_blocks(text: str, name: str) -> str:
    """
    Drop every <name> block, case-insensitively. An unclosed block ends at the
    next <comments> or plan block opener, or at the end of the text.
    """
    opening = re.compile(rf"<{name}>", re.IGNORECASE)
    closing = re.compile(rf"</{name}>", re.IGNORECASE)
    kept = []
    position = 0
    while True:
        found = opening.search(text, position)
        if found is None:
            kept.append(text[position:])
            return "".join(kept)
        kept.append(text[position:found.start()])

        close = closing.search(text, found.end())
        if close is not None:
            end = close.end()
        else:
            stop = _BLOCK_STOP.search(text, found.end())
            end = stop.start() if stop else len(text)

        # commentary nested in a plan block stays visible
        kept.extend(match.group(0) for match in _COMMENTS_BLOCK.finditer(text, found.end(), end))
        position = end


def _is_payload(obj: dict) -> bool:
    return any(key in obj for key in PAYLOAD_KEYS)


def _remove_json_payload(text: str) -> str:
    whole = load_json_object(strip_code_fence(text))
    if whole is not None and _is_payload(whole):
        return ""

    regions = [(start, end) for start, end, obj in iter_json_objects(text) if _is_payload(obj)]
    for start, end in reversed(regions):
        text = text[:start] + text[end:]
    return text


def sanitize_for_display(raw_text: Optional[str]) -> str:
    """
    Strip the structured plan out of a reply, leaving the prose for the chat bubble.

    Falls back to ``FALLBACK_DISPLAY_TEXT`` when nothing readable is left.
    """
    text = raw_text or ""
    commentary = json_commentary(text)

    cleaned = _remove_json_payload(text)
    for name in PAYLOAD_BLOCKS:
        cleaned = _remove_blocks(cleaned, name)
    if _MULTI_DAY_MARKER.search(text):
        # plan-level summary sits outside the day blocks
        cleaned = _remove_blocks(cleaned, "summary")
    cleaned = _EMPTY_FENCE.sub("", cleaned)
    cleaned = _COMMENTS_WRAPPER.sub("", cleaned)

    if commentary and commentary not in cleaned:
        cleaned = f"{commentary}\n\n{cleaned}"

    cleaned = _BLANK_RUNS.sub("\n\n", cleaned).strip()
    if not cleaned:
        logger.debug("Reply was all plan payload, using fallback display text")
        return config.FALLBACK_DISPLAY_TEXT
    return cleaned
