"""Guest schemas: v1 wire payload and the add/edit form."""

from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ValidationInfo, field_validator

from pgdash.models.guest import FoodPreference, Guest, PaymentCycle, StayStatus
from pgdash.schemas.common import (
    EMAIL_PATTERN,
    FORM_CONFIG,
    PHONE_PATTERN,
    WIRE_CONFIG,
    FormAmount,
    FormDate,
    WireDate,
    WireId,
    WireMoney,
    WireText,
    id_field,
    is_blank,
    parse_enum,
    reject,
)

# ---------------------------------------------------------------------------
# Wire schema (v1)
# ---------------------------------------------------------------------------


class GuestPayloadV1(BaseModel):
    """Guest as served by ``/getDetailsof/guests`` (camelCase JSON)."""

    model_config = WIRE_CONFIG

    id: WireId = id_field()
    name: WireText = ""
    email: WireText = ""
    contact: WireText = ""
    location: WireText = ""
    dob: WireDate = None
    guardian_name: WireText = ""
    guardian_contact: WireText = ""
    emergency_contact_name: WireText = ""
    emergency_contact_relation: WireText = ""
    emergency_contact_number: WireText = ""
    occupation_course: WireText = ""
    join_date: WireDate = None
    expected_date_from: WireDate = None
    expected_date_to: WireDate = None
    payment_cycle: str | None = None
    amount_paid: WireMoney = None
    deposit_amount: WireMoney = None
    food_preference: str | None = None
    stay_status: str | None = None
    file_url: str | None = None

    def to_model(self) -> Guest:
        return Guest(
            id=self.id,
            name=self.name,
            email=self.email,
            contact=self.contact,
            location=self.location,
            dob=self.dob,
            guardian_name=self.guardian_name,
            guardian_contact=self.guardian_contact,
            emergency_contact_name=self.emergency_contact_name,
            emergency_contact_relation=self.emergency_contact_relation,
            emergency_contact_number=self.emergency_contact_number,
            occupation_course=self.occupation_course,
            join_date=self.join_date,
            expected_date_from=self.expected_date_from,
            expected_date_to=self.expected_date_to,
            payment_cycle=parse_enum(PaymentCycle, self.payment_cycle, PaymentCycle.MONTHLY),
            amount_paid=self.amount_paid if self.amount_paid is not None else Decimal("0"),
            deposit_amount=self.deposit_amount,
            food_preference=parse_enum(FoodPreference, self.food_preference, FoodPreference.WITH_FOOD),
            stay_status=parse_enum(StayStatus, self.stay_status, None),
            file_url=self.file_url or None,
        )

    @classmethod
    def from_model(cls, guest: Guest) -> "GuestPayloadV1":
        data = guest.model_dump(exclude={"payment_cycle", "food_preference", "stay_status"})
        return cls(
            **data,
            payment_cycle=guest.payment_cycle.value,
            food_preference=guest.food_preference.value,
            stay_status=guest.stay_status.value if guest.stay_status else None,
        )

    def to_request(self) -> dict[str, Any]:
        """JSON body for create/update requests. The id travels in the path."""
        return self.model_dump(mode="json", by_alias=True, exclude={"id"}, exclude_none=True)


# ---------------------------------------------------------------------------
# Form schema
# ---------------------------------------------------------------------------

_REQUIRED_MESSAGES = {
    "name": "Name is required",
    "email": "Email is required",
    "contact": "Contact number is required",
    "location": "Location is required",
    "dob": "Date of birth is required",
    "guardian_name": "Guardian name is required",
    "guardian_contact": "Guardian contact is required",
    "emergency_contact_name": "Emergency contact name is required",
    "emergency_contact_relation": "Emergency contact relation is required",
    "emergency_contact_number": "Emergency contact number is required",
    "occupation_course": "Occupation/Course is required",
    "join_date": "Join date is required",
    "expected_date_from": "Expected start date is required",
    "expected_date_to": "Expected end date is required",
}

_PHONE_MESSAGES = {
    "contact": "Please enter a valid contact number",
    "guardian_contact": "Please enter a valid guardian contact number",
    "emergency_contact_number": "Please enter a valid emergency contact number",
}


class GuestForm(BaseModel):
    """Add/edit guest form. Validated locally before any request is sent."""

    model_config = FORM_CONFIG

    name: str = ""
    email: str = ""
    contact: str = ""
    location: str = ""
    dob: FormDate = None
    guardian_name: str = ""
    guardian_contact: str = ""
    emergency_contact_name: str = ""
    emergency_contact_relation: str = ""
    emergency_contact_number: str = ""
    occupation_course: str = ""
    payment_cycle: PaymentCycle = PaymentCycle.MONTHLY
    amount_paid: FormAmount = Decimal("0")
    deposit_amount: WireMoney = None
    food_preference: FoodPreference = FoodPreference.WITH_FOOD
    stay_status: StayStatus = StayStatus.CURRENTLY_STAYING
    join_date: FormDate = None
    expected_date_from: FormDate = None
    expected_date_to: FormDate = None
    file_url: str | None = None

    @field_validator(*_REQUIRED_MESSAGES, mode="after")
    @classmethod
    def _required(cls, value: Any, info: ValidationInfo) -> Any:
        if is_blank(value):
            reject(_REQUIRED_MESSAGES[info.field_name])
        return value

    @field_validator("email", mode="after")
    @classmethod
    def _email_format(cls, value: str) -> str:
        if not EMAIL_PATTERN.match(value):
            reject("Please enter a valid email")
        return value

    @field_validator(*_PHONE_MESSAGES, mode="after")
    @classmethod
    def _phone_format(cls, value: str, info: ValidationInfo) -> str:
        if not PHONE_PATTERN.match(value):
            reject(_PHONE_MESSAGES[info.field_name])
        return value

    @field_validator("amount_paid", mode="after")
    @classmethod
    def _positive_amount(cls, value: Decimal) -> Decimal:
        if value <= 0:
            reject("Amount paid must be greater than 0")
        return value

    def to_model(self, record_id: str | None = None, previous: Guest | None = None) -> Guest:
        return Guest(id=record_id, **self.model_dump())

    @classmethod
    def from_model(cls, guest: Guest) -> dict[str, Any]:
        """Initial form values for editing an existing guest."""
        return guest.model_dump(exclude={"id"})
