"""Rent record domain model: one payment expectation for a guest."""

from datetime import date
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, ConfigDict

from pgdash.models.types import Money


class RentStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"
    OVERDUE = "overdue"
    AWAITING_PAYMENT = "awaiting-payment"


class NoteEntry(BaseModel):
    """A dated entry in a rent record's notes history."""

    model_config = ConfigDict(frozen=True)

    date: date
    note: str


class RentRecord(BaseModel):
    """Rent owed by a guest for one month.

    ``guest_name`` is denormalized, not a reference to a Guest id.
    ``paid_date`` is only kept when ``status`` is paid.
    """

    model_config = ConfigDict(frozen=True)

    id: str | None = None
    guest_name: str
    amount: Money = Decimal("0")
    due_date: date | None = None
    paid_date: date | None = None
    payment_method: str = ""
    notes: str = ""
    notes_history: tuple[NoteEntry, ...] = ()
    month: str = ""
    year: int | None = None
    status: RentStatus = RentStatus.PENDING

    @property
    def is_paid(self) -> bool:
        return self.status is RentStatus.PAID
