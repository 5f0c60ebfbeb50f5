# dietplan/interpreter/commentary.py
import logging
import re
from typing import Any, Dict, Optional

from dietplan.interpreter.json_scan import iter_json_objects, load_json_object, strip_code_fence

logger = logging.getLogger(__name__)

COMMENTS_KEY = "comments"

_COMMENTS_TAG = re.compile(r"<comments>(.*?)</comments>", re.IGNORECASE | re.DOTALL)


def _comments_value(payload: Dict[str, Any]) -> Optional[str]:
    value = payload.get(COMMENTS_KEY)
    return value.strip() if isinstance(value, str) else None


def json_commentary(raw_text: Optional[str]) -> Optional[str]:
    """Commentary carried under the ``comments`` key of the JSON encoding."""
    text = raw_text or ""
    whole = load_json_object(strip_code_fence(text))
    if whole is not None and COMMENTS_KEY in whole:
        return _comments_value(whole)

    for _, _, payload in iter_json_objects(text):
        if COMMENTS_KEY in payload:
            return _comments_value(payload)
    return None


def extract_commentary(raw_text: Optional[str]) -> Optional[str]:
    """
    Return the assistant's free-text commentary, trimmed.

    A ``<comments>`` tag takes priority over the JSON ``comments`` key.
    ``None`` means no commentary marker exists; ``""`` means it was empty.
    """
    text = raw_text or ""
    match = _COMMENTS_TAG.search(text)
    if match:
        return match.group(1).strip()
    commentary = json_commentary(text)
    if commentary is None:
        logger.debug("No commentary found in reply")
    return commentary
