"""Canonical internal types.

These are the only shapes controllers work with. API payloads are parsed
through the versioned wire schemas in ``pgdash.schemas`` and translated
into these models at the client boundary.
"""

from pgdash.models.guest import FoodPreference, Guest, PaymentCycle, StayStatus
from pgdash.models.rent import NoteEntry, RentRecord, RentStatus
from pgdash.models.review import Review
from pgdash.models.user import SessionUser

__all__ = [
    "FoodPreference",
    "Guest",
    "NoteEntry",
    "PaymentCycle",
    "RentRecord",
    "RentStatus",
    "Review",
    "SessionUser",
    "StayStatus",
]
