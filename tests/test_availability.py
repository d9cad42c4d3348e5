"""Tests for the pure slot availability and pricing functions."""

from datetime import date, datetime, timedelta
from decimal import Decimal

import pytest

from meydancha.core.exceptions import InvalidConfiguration, InvalidRange, InvalidTimeFormat
from meydancha.services.availability import (
    BookedRange,
    SlotWindow,
    available_slots,
    booking_duration_minutes,
    calculate_price,
    can_cancel,
    filter_past,
    format_time,
    generate_slots,
    is_past,
    is_range_available,
    parse_time,
    ranges_overlap,
)

from tests.conftest import FIXED_NOW, TODAY, TOMORROW, YESTERDAY

DAY_WINDOW = SlotWindow("08:00", "22:00")
DAY_SLOTS = [f"{hour:02d}:00" for hour in range(8, 22)]


class TestParseTime:
    @pytest.mark.parametrize(
        "value, expected",
        [("00:00", 0), ("08:30", 510), ("23:59", 1439), ("24:00", 1440)],
    )
    def test_valid_values(self, value, expected):
        assert parse_time(value) == expected

    @pytest.mark.parametrize(
        "value",
        ["8:00", "08:60", "25:00", "24:01", "0800", "08:00 ", "", "ab:cd", None],
    )
    def test_invalid_values(self, value):
        with pytest.raises(InvalidTimeFormat):
            parse_time(value)

    def test_format_pads_hours_and_minutes(self):
        assert format_time(65) == "01:05"
        assert format_time(1440) == "24:00"


class TestGenerateSlots:
    def test_operating_window(self):
        assert generate_slots(DAY_WINDOW) == DAY_SLOTS

    def test_full_day_by_default(self):
        slots = generate_slots(SlotWindow())

        assert len(slots) == 24
        assert slots[0] == "00:00"
        assert slots[-1] == "23:00"

    def test_is_deterministic(self):
        assert generate_slots(DAY_WINDOW) == generate_slots(SlotWindow("08:00", "22:00"))

    def test_partial_last_slot_is_dropped(self):
        assert generate_slots(SlotWindow("08:00", "10:30")) == ["08:00", "09:00"]

    def test_custom_step(self):
        assert generate_slots(SlotWindow("10:00", "12:00", 30)) == [
            "10:00",
            "10:30",
            "11:00",
            "11:30",
        ]

    @pytest.mark.parametrize(
        "open_time, close_time, step",
        [
            ("22:00", "08:00", 60),
            ("08:00", "08:00", 60),
            ("8am", "22:00", 60),
            ("08:00", "22:00", 0),
            ("08:00", "22:00", -60),
        ],
    )
    def test_malformed_window(self, open_time, close_time, step):
        with pytest.raises(InvalidConfiguration):
            SlotWindow(open_time, close_time, step)


class TestAvailableSlots:
    def test_booking_blocks_its_own_hours_only(self):
        bookings = [BookedRange(date(2025, 6, 1), "10:00", "12:00")]

        result = available_slots(DAY_SLOTS, date(2025, 6, 1), bookings)

        assert "10:00" not in result
        assert "11:00" not in result
        assert result == [slot for slot in DAY_SLOTS if slot not in ("10:00", "11:00")]

    def test_booking_end_does_not_block_next_slot(self):
        bookings = [BookedRange(TODAY, "18:00", "20:00")]

        result = available_slots(DAY_SLOTS, TODAY, bookings)

        assert "20:00" in result
        assert "18:00" not in result
        assert "19:00" not in result

    def test_other_dates_are_ignored(self):
        bookings = [
            BookedRange(TOMORROW, "08:00", "22:00"),
            BookedRange(YESTERDAY, "08:00", "22:00"),
        ]

        assert available_slots(DAY_SLOTS, TODAY, bookings) == DAY_SLOTS

    def test_datetime_booking_dates_are_truncated(self):
        bookings = [BookedRange(datetime(2025, 6, 1, 0, 0), "09:00", "10:00")]

        result = available_slots(DAY_SLOTS, datetime(2025, 6, 1, 17, 45), bookings)

        assert "09:00" not in result
        assert len(result) == len(DAY_SLOTS) - 1

    def test_overlapping_bookings_union(self):
        bookings = [
            BookedRange(TODAY, "09:00", "12:00"),
            BookedRange(TODAY, "11:00", "13:00"),
        ]

        result = available_slots(DAY_SLOTS, TODAY, bookings)

        assert [slot for slot in DAY_SLOTS if slot not in result] == [
            "09:00",
            "10:00",
            "11:00",
            "12:00",
        ]

    def test_accepts_mappings(self):
        bookings = [{"date": TODAY, "start_time": "15:00", "end_time": "16:00"}]

        assert "15:00" not in available_slots(DAY_SLOTS, TODAY, bookings)

    def test_no_available_slot_falls_inside_a_booking(self):
        bookings = [
            BookedRange(TODAY, "08:30", "10:30"),
            BookedRange(TODAY, "17:00", "19:00"),
        ]

        result = available_slots(DAY_SLOTS, TODAY, bookings)

        for slot in DAY_SLOTS:
            minute = parse_time(slot)
            blocked = any(
                parse_time(b.start_time) <= minute < parse_time(b.end_time)
                for b in bookings
            )
            assert (slot in result) is not blocked


class TestRangeAvailability:
    def test_overlap_is_half_open(self):
        assert ranges_overlap(600, 720, 660, 780)
        assert not ranges_overlap(600, 720, 720, 780)
        assert not ranges_overlap(720, 780, 600, 720)

    def test_adjacent_range_is_free(self):
        bookings = [BookedRange(TODAY, "10:00", "12:00")]

        assert is_range_available("12:00", "14:00", TODAY, bookings)
        assert is_range_available("08:00", "10:00", TODAY, bookings)

    @pytest.mark.parametrize(
        "start_time, end_time",
        [("09:00", "11:00"), ("11:00", "13:00"), ("10:30", "11:30"), ("09:00", "13:00")],
    )
    def test_overlapping_range_is_taken(self, start_time, end_time):
        bookings = [BookedRange(TODAY, "10:00", "12:00")]

        assert not is_range_available(start_time, end_time, TODAY, bookings)

    def test_inverted_range_is_rejected(self):
        with pytest.raises(InvalidRange):
            is_range_available("12:00", "10:00", TODAY, [])


class TestFilterPast:
    def test_today_drops_started_slots(self):
        result = filter_past(DAY_SLOTS, TODAY, FIXED_NOW)

        assert result == [f"{hour:02d}:00" for hour in range(15, 22)]

    def test_slot_starting_this_minute_is_past(self):
        now = FIXED_NOW.replace(hour=15, minute=0, second=20)

        assert "15:00" not in filter_past(DAY_SLOTS, TODAY, now)
        assert "16:00" in filter_past(DAY_SLOTS, TODAY, now)

    def test_future_date_is_identity(self):
        assert filter_past(DAY_SLOTS, TOMORROW, FIXED_NOW) == DAY_SLOTS

    def test_earlier_date_is_entirely_past(self):
        assert filter_past(DAY_SLOTS, YESTERDAY, FIXED_NOW) == []

    def test_is_idempotent(self):
        once = filter_past(DAY_SLOTS, TODAY, FIXED_NOW)

        assert filter_past(once, TODAY, FIXED_NOW) == once

    def test_returns_a_new_list(self):
        result = filter_past(DAY_SLOTS, TOMORROW, FIXED_NOW)
        result.append("23:00")

        assert "23:00" not in DAY_SLOTS


class TestIsPast:
    def test_started_hour_is_past(self):
        assert is_past(TODAY, "14:00", FIXED_NOW) is True

    def test_next_hour_is_not_past(self):
        assert is_past(TODAY, "15:00", FIXED_NOW) is False

    def test_current_minute_is_past(self):
        assert is_past(TODAY, "14:30", FIXED_NOW) is True
        assert is_past(TODAY, "14:31", FIXED_NOW) is False

    def test_other_days(self):
        assert is_past(YESTERDAY, "23:00", FIXED_NOW) is True
        assert is_past(TOMORROW, "00:00", FIXED_NOW) is False

    @pytest.mark.parametrize("minutes_after_midnight", range(0, 24 * 60, 7))
    def test_agrees_with_filter_past(self, minutes_after_midnight):
        now = datetime(2025, 6, 1, tzinfo=FIXED_NOW.tzinfo) + timedelta(
            minutes=minutes_after_midnight
        )
        slots = generate_slots(SlotWindow("00:00", "24:00", 30))

        kept = set(filter_past(slots, TODAY, now))

        for slot in slots:
            assert is_past(TODAY, slot, now) is (slot not in kept)


class TestCalculatePrice:
    def test_two_hours(self):
        assert calculate_price(20, "18:00", "20:00") == Decimal("40.00")

    def test_fractional_hours(self):
        assert calculate_price(Decimal("25.00"), "10:00", "11:30") == Decimal("37.50")
        assert calculate_price(Decimal("10.00"), "10:00", "10:20") == Decimal("3.33")

    def test_float_rate_does_not_drift(self):
        assert calculate_price(12.1, "10:00", "13:00") == Decimal("36.30")

    def test_matches_rate_times_hours(self):
        rate = Decimal("17.50")
        for hours in range(1, 10):
            end_time = format_time(8 * 60 + hours * 60)
            assert calculate_price(rate, "08:00", end_time) == rate * hours

    def test_increases_with_duration(self):
        prices = [
            calculate_price(Decimal("30"), "08:00", format_time(8 * 60 + minutes))
            for minutes in range(15, 16 * 60, 15)
        ]

        assert prices == sorted(prices)
        assert len(set(prices)) == len(prices)

    def test_end_of_day_boundary(self):
        assert calculate_price(Decimal("20"), "23:00", "24:00") == Decimal("20.00")

    @pytest.mark.parametrize("start_time, end_time", [("20:00", "18:00"), ("18:00", "18:00")])
    def test_inverted_range(self, start_time, end_time):
        with pytest.raises(InvalidRange):
            calculate_price(20, start_time, end_time)

    @pytest.mark.parametrize("rate", [0, -5, "abc", "NaN"])
    def test_invalid_rate(self, rate):
        with pytest.raises(InvalidConfiguration):
            calculate_price(rate, "18:00", "20:00")

    def test_bad_time_format(self):
        with pytest.raises(InvalidTimeFormat):
            calculate_price(20, "6pm", "20:00")

    def test_duration(self):
        assert booking_duration_minutes("09:15", "10:45") == 90


class TestCanCancel:
    def test_four_hours_ahead_is_allowed(self):
        assert can_cancel(TODAY, "18:30", FIXED_NOW) is True

    def test_less_than_four_hours_is_refused(self):
        assert can_cancel(TODAY, "18:00", FIXED_NOW) is False

    def test_next_day_across_midnight(self):
        late_evening = FIXED_NOW.replace(hour=22, minute=0)

        assert can_cancel(TOMORROW, "01:00", late_evening) is False
        assert can_cancel(TOMORROW, "02:00", late_evening) is True

    def test_custom_notice(self):
        assert can_cancel(TODAY, "15:30", FIXED_NOW, min_notice_hours=1) is True
        assert can_cancel(TODAY, "15:00", FIXED_NOW, min_notice_hours=1) is False


def test_round_trip_without_bookings_keeps_every_slot():
    slots = generate_slots(DAY_WINDOW)
    far_future = date(2030, 1, 1)

    result = filter_past(available_slots(slots, far_future, []), far_future, FIXED_NOW)

    assert result == slots
