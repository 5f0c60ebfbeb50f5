# dietplan/interpreter/json_scan.py
import json
import logging
import re
from typing import Any, Dict, Iterator, List, Optional, Tuple

logger = logging.getLogger(__name__)

_FENCED_BLOCK = re.compile(r"^```(?:json)?\s*([\s\S]*?)\s*```$", re.IGNORECASE)


def strip_code_fence(text: str) -> str:
    """Unwrap a message that is a single markdown code block."""
    stripped = text.strip()
    match = _FENCED_BLOCK.match(stripped)
    if match:
        return match.group(1)
    return stripped


def find_object_regions(text: str) -> List[Tuple[int, int]]:
    """
    Find top-level balanced ``{...}`` regions as (start, end) slices.

    Braces inside JSON string literals are ignored once a region has been
    opened; quotes in the surrounding prose are not treated as strings.
    """
    regions = []
    depth = 0
    start = -1
    in_string = False
    escaped = False

    for i, char in enumerate(text):
        if depth > 0 and in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            continue

        if char == '"' and depth > 0:
            in_string = True
        elif char == "{":
            if depth == 0:
                start = i
            depth += 1
        elif char == "}" and depth > 0:
            depth -= 1
            if depth == 0:
                regions.append((start, i + 1))
                start = -1

    return regions


def load_json_object(text: str) -> Optional[Dict[str, Any]]:
    try:
        parsed = json.loads(text)
    except (json.JSONDecodeError, ValueError):
        return None
    return parsed if isinstance(parsed, dict) else None


def iter_json_objects(text: str) -> Iterator[Tuple[int, int, Dict[str, Any]]]:
    """Yield (start, end, object) for every embedded region that parses as a JSON object."""
    for start, end in find_object_regions(text):
        parsed = load_json_object(text[start:end])
        if parsed is None:
            logger.debug(f"Skipping non-JSON brace region at {start}:{end}")
            continue
        yield start, end, parsed
