import json
import logging
from datetime import datetime

from enrollment_admin.core.config import settings

logger = logging.getLogger("enrollment_admin")


def _entry(event: str, data: dict) -> str:
    entry = {
        "timestamp": datetime.now().isoformat(),
        "event": event,
        "data": data,
    }
    return json.dumps(entry, default=str)


def log_debug(event: str, data: dict):
    """
    Logs structured debug info if enabled.
    """
    if not settings.DEBUG_MODE:
        return
    logger.debug(_entry(event, data))


def log_error(event: str, data: dict):
    """
    Logs a structured error entry regardless of DEBUG_MODE.
    """
    logger.error(_entry(event, data))
