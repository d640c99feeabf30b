"""
Which days and time ranges are offerable, per fulfillment method and city.

Pure data plus lookups: adding a city or changing store hours should only
touch the dictionaries below, never DeliveryScheduleService.
"""
from datetime import date, timedelta
from typing import Dict, List, Optional

from storefront.config import settings

COURIER = "courier"
PICKUP = "pickup"
METHODS = (COURIER, PICKUP)

COURIER_CONFIG = {
    "time_slots": [
        "09:00-12:00",
        "12:00-15:00",
        "15:00-18:00",
        "18:00-21:00",
    ],
    "days_ahead": range(0, 5),
    "same_day_enabled": False,
    "base_date_offset": 1,
}

PICKUP_CONFIG = {
    "store_hours": "09:00-21:00",
    "days_ahead": range(0, 3),
    "same_day_enabled": True,
    "base_date_offset": 0,
}

CITY_CONFIGS = {
    "Beirut": {
        COURIER: COURIER_CONFIG,
        PICKUP: PICKUP_CONFIG,
    },
}


def normalize_method(method: Optional[str]) -> str:
    method = (method or "").strip().lower()
    return method if method in METHODS else PICKUP


def config_for_city_and_method(city: Optional[str], method: Optional[str]) -> Dict:
    city_config = CITY_CONFIGS.get(city) or CITY_CONFIGS[settings.DEFAULT_CITY]
    return city_config[normalize_method(method)]


def config_for(method: Optional[str], city: Optional[str] = None) -> Dict:
    return config_for_city_and_method(city, method)


def time_slots_for(method: Optional[str], city: Optional[str] = None) -> List[str]:
    config = config_for(method, city)
    if config.get("time_slots"):
        return list(config["time_slots"])
    return [config.get("store_hours") or store_hours()]


def days_ahead_for(method: Optional[str], city: Optional[str] = None) -> range:
    return config_for(method, city)["days_ahead"]


def same_day_enabled_for(method: Optional[str], city: Optional[str] = None) -> bool:
    return bool(config_for(method, city)["same_day_enabled"])


def base_date_for(method: Optional[str], today: date, city: Optional[str] = None) -> date:
    return today + timedelta(days=config_for(method, city)["base_date_offset"])


def store_hours() -> str:
    return PICKUP_CONFIG["store_hours"]
