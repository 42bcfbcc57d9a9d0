"""
Booking creation payload handed to the platform's booking endpoint.
"""

import json
from decimal import Decimal
from typing import Any, Dict, Sequence

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from ..domain.models import Service, format_time_of_day, parse_time_of_day
from ..domain.request import BookingRequest


class CustomerContact(BaseModel):
    """Contact fields the customer fills in on the last wizard step."""
    name: str = Field(min_length=1)
    email: str = Field(min_length=3)
    phone: str = Field(min_length=1)

    @field_validator("email")
    @classmethod
    def validate_email(cls, value: str) -> str:
        value = value.strip()
        if "@" not in value:
            raise ValueError(f"Invalid email address: {value!r}")
        return value.lower()


class BookingPayload(BaseModel):
    """JSON body of a booking creation call."""
    model_config = ConfigDict(populate_by_name=True)

    business_id: str = Field(alias="businessId")
    service_name: str = Field(alias="serviceName")
    staff_name: str = Field(default="", alias="staffName")
    appointment_date: str = Field(alias="appointmentDate")
    appointment_time: str = Field(alias="appointmentTime")
    total_price: Decimal = Field(alias="totalPrice")
    service_duration: int = Field(alias="serviceDuration", gt=0)
    customer_name: str = Field(alias="customerName")
    customer_email: str = Field(alias="customerEmail")
    customer_phone: str = Field(alias="customerPhone")
    notes: str = ""

    @field_validator("appointment_time")
    @classmethod
    def normalize_time(cls, value: str) -> str:
        """Accept ``H:MM`` input but always emit zero-padded ``HH:MM``."""
        return format_time_of_day(parse_time_of_day(value))

    @field_serializer("total_price")
    def serialize_price(self, value: Decimal) -> float:
        return float(value)

    def to_json_dict(self) -> Dict[str, Any]:
        """Camel-cased dict ready for ``requests.post(json=...)``."""
        return self.model_dump(by_alias=True)


def serialize_service_names(services: Sequence[Service]) -> str:
    """
    Encode the chosen services for the ``serviceName`` field.

    One service is sent as its plain name; several are sent as a JSON list
    of ``{name, price, duration}`` objects.
    """
    if len(services) == 1:
        return services[0].name

    return json.dumps(
        [
            {
                "name": service.name,
                "price": float(service.price),
                "duration": service.duration_label,
            }
            for service in services
        ],
        ensure_ascii=False,
    )


def build_booking_payload(
    *,
    business_id: str,
    request: BookingRequest,
    appointment_time: str,
    customer: CustomerContact,
    notes: str = "",
) -> BookingPayload:
    """
    Assemble the booking creation payload from a finished selection.

    Raises:
        ValueError: If the request has no services or the time is malformed
    """
    if not request.selected_services:
        raise ValueError("A booking needs at least one service")

    return BookingPayload(
        business_id=str(business_id),
        service_name=serialize_service_names(request.selected_services),
        staff_name=request.staff_name,
        appointment_date=f"{request.date.year:04d}-{request.date.month:02d}-{request.date.day:02d}",
        appointment_time=appointment_time,
        total_price=request.total_price,
        service_duration=request.total_duration_minutes,
        customer_name=customer.name,
        customer_email=customer.email,
        customer_phone=customer.phone,
        notes=notes,
    )
