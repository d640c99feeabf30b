"""
Parsing of human-readable time ranges.

Two shapes are understood:

    "9 AM - 12:30 PM"   12-hour, minutes optional, meridiem case-insensitive
    "09:00-12:00"       canonical 24-hour form used by the delivery configuration

Every public helper is a pure function of its input (plus the configured time
zone for the datetime variants), so they are safe to call from any request.
"""
import re
from datetime import date, datetime, time
from typing import NamedTuple, Optional
from zoneinfo import ZoneInfo

from storefront.config import settings

_SEPARATOR = re.compile(r"\s*-\s*")
_TWELVE_HOUR = re.compile(r"^(\d{1,2})(?::(\d{2}))?\s*(AM|PM)$", re.IGNORECASE)
_TWENTY_FOUR_HOUR = re.compile(r"^(\d{2}):(\d{2})$")

DELIVERY_TIME_SLOTS = (
    "09:00-12:00",
    "12:00-15:00",
    "15:00-18:00",
    "18:00-21:00",
)


class TimeRange(NamedTuple):
    start_time: Optional[time]
    end_time: Optional[time]


class DatetimeRange(NamedTuple):
    start_datetime: Optional[datetime]
    end_datetime: Optional[datetime]


_EMPTY_RANGE = TimeRange(None, None)
_EMPTY_DATETIME_RANGE = DatetimeRange(None, None)


def _parse_twelve_hour(text: str) -> Optional[time]:
    m = _TWELVE_HOUR.match(text.strip())
    if not m:
        return None
    hour = int(m.group(1))
    minute = int(m.group(2) or 0)
    if not 1 <= hour <= 12 or minute >= 60:
        return None
    meridiem = m.group(3).upper()
    if meridiem == "AM" and hour == 12:
        hour = 0
    elif meridiem == "PM" and hour != 12:
        hour += 12
    return time(hour, minute)


def _parse_twenty_four_hour(text: str) -> Optional[time]:
    m = _TWENTY_FOUR_HOUR.match(text.strip())
    if not m:
        return None
    hour, minute = int(m.group(1)), int(m.group(2))
    if hour > 23 or minute >= 60:
        return None
    return time(hour, minute)


# both ends of a range must use the same shape
_CLOCK_GRAMMARS = (_parse_twelve_hour, _parse_twenty_four_hour)


class TimeSlotParser:
    @staticmethod
    def zone() -> ZoneInfo:
        return ZoneInfo(settings.TIMEZONE)

    @classmethod
    def parse_time_slot(cls, time_slot: Optional[str]) -> TimeRange:
        if not time_slot or not _SEPARATOR.search(time_slot):
            return _EMPTY_RANGE
        parts = _SEPARATOR.split(time_slot.strip(), maxsplit=1)
        if len(parts) != 2:
            return _EMPTY_RANGE
        for parse_clock in _CLOCK_GRAMMARS:
            start, end = parse_clock(parts[0]), parse_clock(parts[1])
            if start is not None and end is not None:
                return TimeRange(start, end)
        return _EMPTY_RANGE

    @classmethod
    def parse_datetime_range(
        cls, time_slot: Optional[str], on: date, tz: Optional[ZoneInfo] = None
    ) -> DatetimeRange:
        start, end = cls.parse_time_slot(time_slot)
        if start is None or end is None:
            return _EMPTY_DATETIME_RANGE
        tz = tz or cls.zone()
        return DatetimeRange(
            datetime.combine(on, start, tzinfo=tz),
            datetime.combine(on, end, tzinfo=tz),
        )

    @classmethod
    def parse_delivery_datetime(
        cls, time_slot: Optional[str], on: date, tz: Optional[ZoneInfo] = None
    ) -> Optional[datetime]:
        return cls.parse_datetime_range(time_slot, on, tz).start_datetime

    @classmethod
    def is_valid(cls, time_slot: Optional[str]) -> bool:
        start, end = cls.parse_time_slot(time_slot)
        return start is not None and end is not None

    @staticmethod
    def is_valid_delivery_time_slot(time_slot: Optional[str]) -> bool:
        # stricter than is_valid: only the fixed courier windows are accepted
        return time_slot in DELIVERY_TIME_SLOTS
