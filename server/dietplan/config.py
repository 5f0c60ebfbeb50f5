# dietplan/config.py
import logging
import os

from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning(f"Environment variable {name}={raw!r} is not an integer, using default {default}")
        return default


LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CORS_ORIGINS", "http://localhost:5173,http://localhost:3000").split(",")
    if origin.strip()
]

# Chat input limit enforced before a message is forwarded to the model
MAX_CHAT_MESSAGE_LENGTH = _int_env("MAX_CHAT_MESSAGE_LENGTH", 5000)

# Upper bound for day_number in multi-day plans
MAX_PLAN_DAYS = _int_env("MAX_PLAN_DAYS", 7)

# Shown in a chat bubble when nothing but the plan payload was sent
FALLBACK_DISPLAY_TEXT = os.getenv("FALLBACK_DISPLAY_TEXT", "plan updated above")
