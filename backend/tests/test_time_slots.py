from datetime import date, time

import pytest

from storefront.utils.time_slots import TimeSlotParser


@pytest.mark.parametrize(
    "slot, start, end",
    [
        ("9 AM - 12:30 PM", time(9, 0), time(12, 30)),
        ("9am-5pm", time(9, 0), time(17, 0)),
        ("12 AM - 12 PM", time(0, 0), time(12, 0)),
        ("09:00-12:00", time(9, 0), time(12, 0)),
        ("18:00 - 21:00", time(18, 0), time(21, 0)),
    ],
)
def test_parse_time_slot(slot, start, end):
    assert TimeSlotParser.parse_time_slot(slot) == (start, end)


@pytest.mark.parametrize(
    "slot",
    [
        None,
        "",
        "9 AM",
        "13:00 AM - 12:00 PM",
        "24:00-25:00",
        "9:00-12:00",
        "noon - 3 PM",
        "9 AM - 12:75 PM",
        "9 AM - 21:00",
        "09:00 - 5 PM",
    ],
)
def test_parse_time_slot_rejects_malformed(slot):
    assert TimeSlotParser.parse_time_slot(slot) == (None, None)
    assert not TimeSlotParser.is_valid(slot)


def test_parse_datetime_range_is_zone_aware():
    start, end = TimeSlotParser.parse_datetime_range("09:00-12:00", date(2025, 10, 20))
    assert start.tzinfo is not None
    assert str(start.tzinfo) == "Asia/Beirut"
    assert (start.hour, end.hour) == (9, 12)
    assert start.date() == end.date() == date(2025, 10, 20)


def test_parse_delivery_datetime_returns_start():
    start = TimeSlotParser.parse_delivery_datetime("3 PM - 6 PM", date(2025, 10, 20))
    assert (start.hour, start.minute) == (15, 0)
    assert TimeSlotParser.parse_delivery_datetime("garbage", date(2025, 10, 20)) is None


def test_delivery_slot_allow_list():
    assert TimeSlotParser.is_valid_delivery_time_slot("09:00-12:00")
    assert TimeSlotParser.is_valid("10:00-13:00")
    assert not TimeSlotParser.is_valid_delivery_time_slot("10:00-13:00")
    assert not TimeSlotParser.is_valid_delivery_time_slot(None)


@pytest.mark.parametrize(
    "slot, hour",
    [("09:00-12:00", 9), ("12:00-15:00", 12), ("15:00-18:00", 15), ("18:00-21:00", 18)],
)
def test_canonical_delivery_slots_parse_to_start_instant(slot, hour):
    assert TimeSlotParser.is_valid_delivery_time_slot(slot)
    start = TimeSlotParser.parse_delivery_datetime(slot, date(2025, 10, 20))
    assert (start.year, start.month, start.day, start.hour, start.minute) == (2025, 10, 20, hour, 0)
