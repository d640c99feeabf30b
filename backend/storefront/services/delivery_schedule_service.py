from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Callable, List, Optional, Tuple
from zoneinfo import ZoneInfo

from storefront.config import settings
from storefront.i18n import localize_date, translate
from storefront.services import delivery_config
from storefront.utils.logging import get_logger
from storefront.utils.time_slots import TimeSlotParser

logger = get_logger(__name__)

VALUE_SEPARATOR = "|"


@dataclass(frozen=True)
class DeliveryOption:
    date: date
    time: str
    display: str
    value: str
    disabled: bool
    selected: bool


class DeliveryScheduleService:
    """
    Builds the selectable (date, time range) options for one checkout form.

    The service is read-only; `now` can be injected so callers (and tests)
    control the clock, otherwise the current time in settings.TIMEZONE is used.
    """

    def __init__(
        self,
        method: Optional[str],
        city: Optional[str] = None,
        selected_date: Optional[date] = None,
        selected_time: Optional[str] = None,
        locale: Optional[str] = None,
        now: Optional[Callable[[], datetime]] = None,
    ):
        self.delivery_method = delivery_config.normalize_method(method)
        self.city = city or settings.DEFAULT_CITY
        self.selected_date = selected_date
        self.selected_time = selected_time
        self.locale = locale
        self.tz = ZoneInfo(settings.TIMEZONE)
        self._now = now or (lambda: datetime.now(self.tz))

    def now(self) -> datetime:
        current = self._now()
        if current.tzinfo is None:
            return current.replace(tzinfo=self.tz)
        return current.astimezone(self.tz)

    def today(self) -> date:
        return self.now().date()

    def title_for_method(self) -> str:
        return translate(f"delivery.titles.{self.delivery_method}", self.locale)

    def subtitle_for_method(self) -> str:
        return translate(f"delivery.subtitles.{self.delivery_method}", self.locale)

    def placeholder_text(self) -> str:
        if self.delivery_method == delivery_config.COURIER:
            return translate("delivery.placeholders.courier", self.locale)
        first = delivery_config.base_date_for(self.delivery_method, self.today(), self.city)
        days = delivery_config.days_ahead_for(self.delivery_method, self.city)
        last = first + timedelta(days=max(days))
        return translate(
            "delivery.placeholders.pickup",
            self.locale,
            start_date=localize_date(first, "short", self.locale),
            end_date=localize_date(last, "short", self.locale),
        )

    def available_options(self) -> List[DeliveryOption]:
        base_date = delivery_config.base_date_for(self.delivery_method, self.today(), self.city)
        time_slots = delivery_config.time_slots_for(self.delivery_method, self.city)

        options = []
        for day_offset in delivery_config.days_ahead_for(self.delivery_method, self.city):
            day = base_date + timedelta(days=day_offset)
            for time_slot in time_slots:
                options.append(
                    DeliveryOption(
                        date=day,
                        time=time_slot,
                        display=f"{self.format_date_display(day)} - {time_slot}",
                        value=self.option_value(day, time_slot),
                        disabled=self.option_disabled(day, time_slot),
                        selected=self.option_selected(day, time_slot),
                    )
                )
        return options

    def available_dates(self) -> List[date]:
        return sorted({opt.date for opt in self.available_options()})

    def has_selection(self) -> bool:
        return bool(self.selected_date and self.selected_time)

    def option_selected(self, day: date, time_slot: str) -> bool:
        if not self.has_selection():
            return False
        return _as_date(self.selected_date) == _as_date(day) and self.selected_time == time_slot

    def option_disabled(self, day: date, time_slot: str) -> bool:
        today = self.today()
        if day != today:
            return False
        if not delivery_config.same_day_enabled_for(self.delivery_method, self.city):
            return True
        return self.time_slot_has_passed(time_slot, day)

    def time_slot_has_passed(self, time_slot: str, day: date) -> bool:
        window = TimeSlotParser.parse_datetime_range(time_slot, day, self.tz)
        if window.end_datetime is None:
            logger.warning(f"Unparseable time slot {time_slot!r}; treating as unavailable")
            return True
        return window.end_datetime <= self.now()

    def format_date_display(self, day: date) -> str:
        today = self.today()
        if day == today:
            return translate("delivery.relative.today", self.locale)
        if day == today + timedelta(days=1):
            return translate("delivery.relative.tomorrow", self.locale)
        return localize_date(day, "short", self.locale)

    def current_selection_display(self) -> str:
        if not self.has_selection():
            return ""
        return f"{localize_date(_as_date(self.selected_date), 'display', self.locale)} - {self.selected_time}"

    @staticmethod
    def option_value(day: date, time_slot: str) -> str:
        return f"{day.isoformat()}{VALUE_SEPARATOR}{time_slot}"

    @staticmethod
    def parse_option_value(value: Optional[str]) -> Tuple[Optional[date], Optional[str]]:
        if not value or VALUE_SEPARATOR not in value:
            return None, None
        raw_date, time_slot = value.split(VALUE_SEPARATOR, 1)
        try:
            day = date.fromisoformat(raw_date.strip())
        except ValueError:
            return None, None
        time_slot = time_slot.strip()
        return (day, time_slot) if time_slot else (None, None)

    def validate_selection(self) -> bool:
        """
        Checkout-time check: the stored selection must be one of the offered,
        still-enabled options. Courier windows must also be on the fixed list.
        """
        if not self.has_selection():
            return False
        if (
            self.delivery_method == delivery_config.COURIER
            and not TimeSlotParser.is_valid_delivery_time_slot(self.selected_time)
        ):
            return False
        return any(opt.selected and not opt.disabled for opt in self.available_options())


def _as_date(value) -> date:
    return value.date() if isinstance(value, datetime) else value
