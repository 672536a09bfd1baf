"""Guest domain model."""

from datetime import date
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, ConfigDict

from pgdash.models.types import Money


class PaymentCycle(str, Enum):
    DAILY = "daily"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    YEARLY = "yearly"


class FoodPreference(str, Enum):
    WITH_FOOD = "with-food"
    WITHOUT_FOOD = "without-food"


class StayStatus(str, Enum):
    CURRENTLY_STAYING = "currently-staying"
    JOINING_SOON = "joining-soon"
    LEFT = "left"


class Guest(BaseModel):
    """A paying guest: personal, guardian, emergency and accommodation details.

    ``id`` is None only for a guest that has not been created remotely yet.
    """

    model_config = ConfigDict(frozen=True)

    id: str | None = None
    name: str
    email: str
    contact: str = ""
    location: str = ""
    dob: date | None = None

    guardian_name: str = ""
    guardian_contact: str = ""
    emergency_contact_name: str = ""
    emergency_contact_relation: str = ""
    emergency_contact_number: str = ""
    occupation_course: str = ""

    join_date: date | None = None
    expected_date_from: date | None = None
    expected_date_to: date | None = None
    payment_cycle: PaymentCycle = PaymentCycle.MONTHLY
    amount_paid: Money = Decimal("0")
    deposit_amount: Money | None = None
    food_preference: FoodPreference = FoodPreference.WITH_FOOD
    stay_status: StayStatus | None = StayStatus.CURRENTLY_STAYING

    file_url: str | None = None

    def __repr__(self) -> str:
        return f"<Guest id={self.id} name={self.name!r} stay_status={self.stay_status}>"
