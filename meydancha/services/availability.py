"""Slot availability and pricing rules for field bookings.

Every function in this module is pure. Callers pass in the day window, the
existing bookings and the current instant; nothing here touches the database
or reads the system clock. Times are ``HH:MM`` wall-clock strings and are
handled internally as minutes after midnight.

``now`` must already be expressed in the field's local time zone: the past
checks compare wall-clock values and ignore ``tzinfo``.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Iterable, List, Sequence, Tuple, Union

from meydancha.core.exceptions import (
    InvalidConfiguration,
    InvalidRange,
    InvalidTimeFormat,
)

_TIME_PATTERN = re.compile(r"([0-9]{2}):([0-9]{2})")
_CENTS = Decimal("0.01")
_MINUTES_PER_HOUR = Decimal(60)

DateLike = Union[date, datetime]


@dataclass(frozen=True)
class SlotWindow:
    """Bookable part of a day, split into fixed-length slots."""

    open_time: str = "00:00"
    close_time: str = "24:00"
    step_minutes: int = 60

    def __post_init__(self) -> None:
        try:
            opens = parse_time(self.open_time)
            closes = parse_time(self.close_time)
        except InvalidTimeFormat as exc:
            raise InvalidConfiguration(
                f"Invalid operating hours: {exc.message}"
            ) from exc

        if closes <= opens:
            raise InvalidConfiguration(
                f"Closing time {self.close_time} must be after opening time {self.open_time}"
            )
        if not isinstance(self.step_minutes, int) or self.step_minutes <= 0:
            raise InvalidConfiguration("Slot length must be a positive number of minutes")


@dataclass(frozen=True)
class BookedRange:
    """Snapshot of an existing booking as seen by the availability checks."""

    date: DateLike
    start_time: str
    end_time: str


def parse_time(value: str) -> int:
    """Return the number of minutes after midnight for an ``HH:MM`` string.

    ``24:00`` is accepted as the end-of-day boundary.
    """

    match = _TIME_PATTERN.fullmatch(value) if isinstance(value, str) else None
    if match is None:
        raise InvalidTimeFormat(f"Invalid time format '{value}' (must be HH:MM)")

    hours = int(match.group(1))
    minutes = int(match.group(2))
    if minutes >= 60 or hours > 24 or (hours == 24 and minutes):
        raise InvalidTimeFormat(f"Invalid time '{value}'")

    return hours * 60 + minutes


def format_time(minutes: int) -> str:
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def generate_slots(window: SlotWindow) -> List[str]:
    """Return the start time of every slot that fits entirely inside the window."""

    opens = parse_time(window.open_time)
    closes = parse_time(window.close_time)
    last_start = closes - window.step_minutes

    return [
        format_time(start)
        for start in range(opens, last_start + 1, window.step_minutes)
    ]


def _day_of(value: DateLike) -> date:
    # datetime is a subclass of date, so it has to be checked first
    if isinstance(value, datetime):
        return value.date()
    return value


def _read(booking: Any, name: str) -> Any:
    if isinstance(booking, Mapping):
        return booking[name]
    return getattr(booking, name)


def _minute_of_day(moment: datetime) -> int:
    return moment.hour * 60 + moment.minute


def _same_day_ranges(target_date: DateLike, bookings: Iterable[Any]) -> List[Tuple[int, int]]:
    day = _day_of(target_date)
    ranges = []
    for booking in bookings:
        if _day_of(_read(booking, "date")) != day:
            continue

        start = parse_time(_read(booking, "start_time"))
        end = parse_time(_read(booking, "end_time"))
        if start >= end:
            continue
        ranges.append((start, end))
    return ranges


def booking_duration_minutes(start_time: str, end_time: str) -> int:
    start = parse_time(start_time)
    end = parse_time(end_time)
    if end <= start:
        raise InvalidRange(
            f"End time {end_time} must be after start time {start_time}"
        )
    return end - start


def ranges_overlap(first_start: int, first_end: int, second_start: int, second_end: int) -> bool:
    """Half-open overlap test: ranges that only touch do not overlap."""
    return first_start < second_end and second_start < first_end


def available_slots(
    slots: Sequence[str],
    target_date: DateLike,
    bookings: Iterable[Any],
) -> List[str]:
    """Drop every slot whose start falls inside a same-day booking.

    A booking ``[start, end)`` blocks a slot ``S`` when ``start <= S < end``;
    bookings on other dates are ignored.
    """

    blocked = _same_day_ranges(target_date, bookings)

    result = []
    for slot in slots:
        slot_start = parse_time(slot)
        if any(start <= slot_start < end for start, end in blocked):
            continue
        result.append(slot)
    return result


def is_range_available(
    start_time: str,
    end_time: str,
    target_date: DateLike,
    bookings: Iterable[Any],
) -> bool:
    booking_duration_minutes(start_time, end_time)
    start = parse_time(start_time)
    end = parse_time(end_time)

    return not any(
        ranges_overlap(start, end, booked_start, booked_end)
        for booked_start, booked_end in _same_day_ranges(target_date, bookings)
    )


def filter_past(slots: Sequence[str], target_date: DateLike, now: datetime) -> List[str]:
    """Remove the slots that have already started.

    Only today is filtered slot by slot; a slot starting in the current
    minute counts as started. Every slot of an earlier date is past and a
    later date is returned unchanged.
    """

    day = _day_of(target_date)
    today = now.date()

    if day > today:
        return list(slots)
    if day < today:
        return []

    current_minute = _minute_of_day(now)
    return [slot for slot in slots if parse_time(slot) > current_minute]


def is_past(target_date: DateLike, start_time: str, now: datetime) -> bool:
    """Return ``True`` when a booking starting at ``start_time`` has already begun."""

    start = parse_time(start_time)
    day = _day_of(target_date)
    today = now.date()

    if day != today:
        return day < today
    return start <= _minute_of_day(now)


def _as_money(value: Any) -> Decimal:
    if isinstance(value, Decimal):
        return value
    try:
        # str() keeps floats like 12.1 from turning into 12.0999...
        return Decimal(str(value))
    except (InvalidOperation, ValueError) as exc:
        raise InvalidConfiguration(f"Invalid price per hour '{value}'") from exc


def calculate_price(rate: Any, start_time: str, end_time: str) -> Decimal:
    """Price of ``[start_time, end_time)`` at ``rate`` per hour, rounded to cents."""

    minutes = booking_duration_minutes(start_time, end_time)
    hourly_rate = _as_money(rate)
    if not hourly_rate.is_finite() or hourly_rate <= 0:
        raise InvalidConfiguration("Price per hour must be greater than zero")

    total = hourly_rate * Decimal(minutes) / _MINUTES_PER_HOUR
    return total.quantize(_CENTS, rounding=ROUND_HALF_UP)


def can_cancel(
    target_date: DateLike,
    start_time: str,
    now: datetime,
    *,
    min_notice_hours: float = 4,
) -> bool:
    """Cancellation is allowed while at least ``min_notice_hours`` remain before the start."""

    day = _day_of(target_date)
    starts_at = datetime(day.year, day.month, day.day) + timedelta(
        minutes=parse_time(start_time)
    )
    wall_clock_now = now.replace(tzinfo=None)

    return starts_at - wall_clock_now >= timedelta(hours=min_notice_hours)


__all__ = [
    "BookedRange",
    "SlotWindow",
    "available_slots",
    "booking_duration_minutes",
    "calculate_price",
    "can_cancel",
    "filter_past",
    "format_time",
    "generate_slots",
    "is_past",
    "is_range_available",
    "parse_time",
    "ranges_overlap",
]
