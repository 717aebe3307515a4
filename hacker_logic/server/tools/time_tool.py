"""
Time tool: current time for a named timezone.
"""

import logging
from functools import lru_cache
from datetime import datetime, timezone as dt_timezone, tzinfo
from email.utils import format_datetime
from typing import Dict, Any, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError, available_timezones

from ..core.interfaces import BaseToolHandler
from ..core.models import ToolResult, TimeToolInput
from ..core.exceptions import ToolExecutionError

logger = logging.getLogger(__name__)


def format_locale_time(moment: datetime) -> str:
    """Render a datetime the way an en-US locale does (``10/19/2026, 8:05:09 AM``)."""
    hour = moment.hour % 12 or 12
    meridiem = "AM" if moment.hour < 12 else "PM"
    return f"{moment.month}/{moment.day}/{moment.year}, {hour}:{moment:%M:%S} {meridiem}"


@lru_cache(maxsize=1)
def _zone_names_by_key() -> Dict[str, str]:
    return {name.lower(): name for name in available_timezones()}


def resolve_timezone(name: str) -> tzinfo:
    """
    Look up an IANA zone, ignoring case (``utc``, ``america/new_york``).

    Raises:
        ZoneInfoNotFoundError: If no zone matches
    """
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError, OSError):
        if name.upper() == "UTC":
            return dt_timezone.utc
        canonical = _zone_names_by_key().get(name.lower())
        if canonical is None:
            raise ZoneInfoNotFoundError(name)
        return ZoneInfo(canonical)


class TimeToolHandler(BaseToolHandler):
    """Handler for the ``get_time`` tool. Needs no security context."""

    def __init__(self):
        super().__init__(
            "get_time",
            "Get current time for a specific timezone",
            {
                "type": "object",
                "properties": {
                    "timezone": {
                        "type": "string",
                        "description": "Timezone to get time for (e.g., UTC, EST, America/New_York)",
                    },
                },
            },
        )

    async def execute(self, arguments: Optional[Dict[str, Any]]) -> ToolResult:
        try:
            args = self.parse_arguments(TimeToolInput, arguments)
            tz_name = args.timezone or "UTC"
            now = datetime.now(dt_timezone.utc)

            if tz_name == "UTC":
                time_string = format_datetime(now, usegmt=True)
            else:
                try:
                    zone = resolve_timezone(tz_name)
                except (ZoneInfoNotFoundError, ValueError, OSError):
                    raise ToolExecutionError(f"Invalid timezone: {tz_name}", tool_name=self.name)
                time_string = format_locale_time(now.astimezone(zone))

            logger.info(f"Generated time for {tz_name}: {time_string}")
            return self.create_success_result(f"Current time in {tz_name}: {time_string}")

        except Exception as e:
            message = e.message if isinstance(e, ToolExecutionError) else str(e)
            logger.error(f"Failed to get time: {message}")
            return self.create_error_result(f"Failed to get time: {message}")
