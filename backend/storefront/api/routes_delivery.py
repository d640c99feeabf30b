from typing import Optional

from fastapi import APIRouter

from storefront.schemas.delivery_schema import DeliveryOptionOut, DeliveryScheduleOut
from storefront.services.delivery_schedule_service import DeliveryScheduleService

router = APIRouter(prefix="/api/delivery", tags=["delivery"])


@router.get("/schedule", response_model=DeliveryScheduleOut)
def delivery_schedule(
    method: str = "pickup",
    city: Optional[str] = None,
    selected: Optional[str] = None,
    locale: Optional[str] = None,
):
    """
    selected: an option value as returned in `options[].value`,
    e.g. "2025-10-20|09:00-12:00"
    """
    selected_date, selected_time = DeliveryScheduleService.parse_option_value(selected)
    svc = DeliveryScheduleService(
        method=method,
        city=city,
        selected_date=selected_date,
        selected_time=selected_time,
        locale=locale,
    )
    options = svc.available_options()
    return DeliveryScheduleOut(
        method=svc.delivery_method,
        city=svc.city,
        title=svc.title_for_method(),
        subtitle=svc.subtitle_for_method(),
        placeholder=svc.placeholder_text(),
        current_selection=svc.current_selection_display(),
        selection_valid=svc.validate_selection(),
        dates=sorted({opt.date for opt in options}),
        options=[DeliveryOptionOut.model_validate(opt) for opt in options],
    )
