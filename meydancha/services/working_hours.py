"""Weekly operating hours stored on a field as JSON text.

The stored shape is::

    {"monday": {"open": "08:00", "close": "22:00", "enabled": true}, ...}

Days missing from the document are closed. A field without a document is
open every day within the service's default slot window.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import date
from typing import Dict, Optional

from meydancha.core.exceptions import InvalidConfiguration
from meydancha.services.availability import SlotWindow, parse_time

DAYS = (
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
)

_DEFAULT_OPEN = "00:00"
_DEFAULT_CLOSE = "24:00"


@dataclass(frozen=True)
class DaySchedule:
    open_time: str
    close_time: str
    enabled: bool = True


WeeklySchedule = Dict[str, DaySchedule]


def parse_working_hours(raw: Optional[str]) -> Optional[WeeklySchedule]:
    """Parse and validate a working-hours document.

    Returns ``None`` for an empty value. Raises ``InvalidConfiguration`` for
    anything that cannot be turned into valid daily windows.
    """

    if raw is None or not raw.strip():
        return None

    try:
        document = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise InvalidConfiguration("Working hours must be valid JSON") from exc

    if not isinstance(document, dict):
        raise InvalidConfiguration("Working hours must map day names to opening hours")

    schedule: WeeklySchedule = {}
    for day_name, entry in document.items():
        key = str(day_name).strip().lower()
        if key not in DAYS:
            raise InvalidConfiguration(f"Unknown day '{day_name}' in working hours")
        if not isinstance(entry, dict):
            raise InvalidConfiguration(f"Working hours for {key} must be an object")

        open_time = entry.get("open") or _DEFAULT_OPEN
        close_time = entry.get("close") or _DEFAULT_CLOSE
        enabled = entry.get("enabled", True)
        if not isinstance(enabled, bool):
            raise InvalidConfiguration(f"'enabled' for {key} must be true or false")

        # Raises InvalidConfiguration for malformed or inverted windows.
        SlotWindow(open_time, close_time)

        schedule[key] = DaySchedule(open_time, close_time, enabled)

    return schedule


def serialize_working_hours(schedule: Optional[WeeklySchedule]) -> Optional[str]:
    if schedule is None:
        return None

    return json.dumps(
        {
            day: {
                "open": schedule[day].open_time,
                "close": schedule[day].close_time,
                "enabled": schedule[day].enabled,
            }
            for day in DAYS
            if day in schedule
        }
    )


def _day_schedule(schedule: WeeklySchedule, target_date: date) -> Optional[DaySchedule]:
    day = schedule.get(DAYS[target_date.weekday()])
    if day is None or not day.enabled:
        return None
    return day


def window_for_date(
    schedule: Optional[WeeklySchedule],
    target_date: date,
    default: SlotWindow,
) -> Optional[SlotWindow]:
    """Return the slot window for ``target_date`` or ``None`` when the field is closed."""

    if schedule is None:
        return default

    day = _day_schedule(schedule, target_date)
    if day is None:
        return None

    return SlotWindow(day.open_time, day.close_time, default.step_minutes)


def is_within_working_hours(
    schedule: Optional[WeeklySchedule],
    target_date: date,
    start_time: str,
    end_time: str,
    default: SlotWindow,
) -> bool:
    window = window_for_date(schedule, target_date, default)
    if window is None:
        return False

    return (
        parse_time(start_time) >= parse_time(window.open_time)
        and parse_time(end_time) <= parse_time(window.close_time)
    )


__all__ = [
    "DAYS",
    "DaySchedule",
    "WeeklySchedule",
    "is_within_working_hours",
    "parse_working_hours",
    "serialize_working_hours",
    "window_for_date",
]
