import datetime as dt
from typing import List

from pydantic import BaseModel, ConfigDict


class DeliveryOptionOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    date: dt.date
    time: str
    display: str
    value: str
    disabled: bool
    selected: bool


class DeliveryScheduleOut(BaseModel):
    method: str
    city: str
    title: str
    subtitle: str
    placeholder: str
    current_selection: str
    selection_valid: bool
    dates: List[dt.date]
    options: List[DeliveryOptionOut]
