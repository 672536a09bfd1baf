"""Rent record schemas: v1 wire payload and the add/edit form."""

import logging
from datetime import date
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, Field, ValidationInfo, field_validator

from pgdash.models.rent import NoteEntry, RentRecord, RentStatus
from pgdash.schemas.common import (
    FORM_CONFIG,
    MONTHS,
    WIRE_CONFIG,
    FormAmount,
    FormDate,
    WireDate,
    WireInt,
    WireId,
    WireMoney,
    WireText,
    id_field,
    is_blank,
    reject,
)

logger = logging.getLogger(__name__)

# The API stores this status with a capital and an underscore.
_WIRE_STATUS = {RentStatus.AWAITING_PAYMENT: "Awaiting_payment"}


def _parse_status(value: str | None) -> RentStatus:
    if not value:
        return RentStatus.PENDING
    normalized = value.strip().lower().replace("_", "-").replace(" ", "-")
    try:
        return RentStatus(normalized)
    except ValueError:
        logger.warning("Unknown rent status %r, treating as pending", value)
        return RentStatus.PENDING


# ---------------------------------------------------------------------------
# Wire schema (v1)
# ---------------------------------------------------------------------------


class NoteEntryPayloadV1(BaseModel):
    """One ``notesHistory`` element."""

    model_config = WIRE_CONFIG

    date: WireDate = None
    note: WireText = ""


class RentPayloadV1(BaseModel):
    """Rent record as served by ``/get/payments``.

    The guest name travels as ``name``, the due date as ``duedate`` and the
    paid date as ``date`` (ISO string or epoch milliseconds).
    """

    model_config = WIRE_CONFIG

    id: WireId = id_field()
    guest_name: WireText = Field("", alias="name")
    amount: WireMoney = None
    due_date: WireDate = Field(None, alias="duedate")
    paid_date: WireDate = Field(None, alias="date")
    payment_method: WireText = ""
    notes: WireText = ""
    notes_history: list[NoteEntryPayloadV1] | None = None
    month: WireText = ""
    year: WireInt = None
    status: str | None = None

    def to_model(self) -> RentRecord:
        status = _parse_status(self.status)
        history = tuple(
            NoteEntry(date=entry.date, note=entry.note)
            for entry in (self.notes_history or [])
            if entry.date is not None
        )
        return RentRecord(
            id=self.id,
            guest_name=self.guest_name,
            amount=self.amount if self.amount is not None else Decimal("0"),
            due_date=self.due_date,
            paid_date=self.paid_date if status is RentStatus.PAID else None,
            payment_method=self.payment_method,
            notes=self.notes,
            notes_history=history,
            month=self.month,
            year=self.year,
            status=status,
        )

    @classmethod
    def from_model(cls, record: RentRecord) -> "RentPayloadV1":
        return cls(
            id=record.id,
            guest_name=record.guest_name,
            amount=record.amount,
            due_date=record.due_date,
            paid_date=record.paid_date if record.is_paid else None,
            payment_method=record.payment_method,
            notes=record.notes,
            notes_history=[
                NoteEntryPayloadV1(date=entry.date, note=entry.note) for entry in record.notes_history
            ],
            month=record.month,
            year=record.year,
            status=_WIRE_STATUS.get(record.status, record.status.value),
        )

    def to_request(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude={"id"}, exclude_none=True)


# ---------------------------------------------------------------------------
# Form schema
# ---------------------------------------------------------------------------

_REQUIRED_MESSAGES = {
    "guest_name": "Guest name is required",
    "due_date": "Due date is required",
    "month": "Month is required",
    "payment_method": "Payment method is required",
}

MIN_YEAR = 2020
MAX_YEAR = 2030


class RentForm(BaseModel):
    """Add/edit rent record form."""

    model_config = FORM_CONFIG

    guest_name: str = ""
    amount: FormAmount = Decimal("0")
    due_date: FormDate = None
    payment_method: str = ""
    month: str = ""
    year: int = Field(default_factory=lambda: date.today().year)
    status: RentStatus = RentStatus.PENDING
    # Declared after status: the paid-date check reads the validated status.
    paid_date: FormDate = None
    notes: str = ""

    @field_validator(*_REQUIRED_MESSAGES, mode="after")
    @classmethod
    def _required(cls, value: Any, info: ValidationInfo) -> Any:
        if is_blank(value):
            reject(_REQUIRED_MESSAGES[info.field_name])
        return value

    @field_validator("month", mode="after")
    @classmethod
    def _known_month(cls, value: str) -> str:
        for month in MONTHS:
            if month.lower() == value.lower():
                return month
        reject("Please select a valid month")

    @field_validator("amount", mode="after")
    @classmethod
    def _positive_amount(cls, value: Decimal) -> Decimal:
        if value <= 0:
            reject("Amount must be greater than 0")
        return value

    @field_validator("year", mode="after")
    @classmethod
    def _year_in_range(cls, value: int) -> int:
        if not MIN_YEAR <= value <= MAX_YEAR:
            reject(f"Year must be between {MIN_YEAR} and {MAX_YEAR}")
        return value

    @field_validator("paid_date", mode="after")
    @classmethod
    def _paid_date_when_paid(cls, value: date | None, info: ValidationInfo) -> date | None:
        if info.data.get("status") is RentStatus.PAID and value is None:
            reject("Paid date is required when status is paid")
        return value

    def to_model(self, record_id: str | None = None, previous: RentRecord | None = None) -> RentRecord:
        """Build the record to send; a changed note is appended to the history."""
        history = previous.notes_history if previous is not None else ()
        previous_note = previous.notes if previous is not None else ""
        if self.notes and self.notes != previous_note:
            history = (*history, NoteEntry(date=date.today(), note=self.notes))
        data = self.model_dump()
        if self.status is not RentStatus.PAID:
            data["paid_date"] = None
        return RentRecord(id=record_id, notes_history=history, **data)

    @classmethod
    def from_model(cls, record: RentRecord) -> dict[str, Any]:
        data = record.model_dump(exclude={"id", "notes_history"})
        if data["year"] is None:
            del data["year"]
        return data
