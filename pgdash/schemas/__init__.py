"""Versioned wire schemas (``*PayloadV1``) and form schemas.

Wire schemas mirror the JSON the remote API speaks and translate to the
canonical models with ``to_model()`` / ``from_model()``. Form schemas
validate staff input before anything is sent.
"""

from pgdash.schemas.auth import LoginRequest, LoginResponseV1, UserPayloadV1
from pgdash.schemas.common import field_errors
from pgdash.schemas.guest import GuestForm, GuestPayloadV1
from pgdash.schemas.rent import RentForm, RentPayloadV1
from pgdash.schemas.review import ReviewForm, ReviewPayloadV1

__all__ = [
    "GuestForm",
    "GuestPayloadV1",
    "LoginRequest",
    "LoginResponseV1",
    "RentForm",
    "RentPayloadV1",
    "ReviewForm",
    "ReviewPayloadV1",
    "UserPayloadV1",
    "field_errors",
]
