"""Review schemas: v1 wire payload and the add/edit form."""

import logging
from datetime import date
from typing import Any

from pydantic import BaseModel, Field, ValidationInfo, field_validator

from pgdash.models.review import Review
from pgdash.schemas.common import (
    FORM_CONFIG,
    WIRE_CONFIG,
    FormDate,
    WireDate,
    WireInt,
    WireId,
    WireText,
    id_field,
    is_blank,
    reject,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Wire schema (v1)
# ---------------------------------------------------------------------------


class ReviewPayloadV1(BaseModel):
    """Review as served by ``/reviews``. The reviewer's name travels as ``name``."""

    model_config = WIRE_CONFIG

    id: WireId = id_field()
    guest_name: WireText = Field("", alias="name")
    rating: WireInt = None
    comment: WireText = ""
    created_at: WireDate = None

    def to_model(self) -> Review:
        rating = self.rating if self.rating is not None else 5
        if not 1 <= rating <= 5:
            logger.warning("Review %s has out-of-range rating %d, clamping", self.id, rating)
            rating = min(max(rating, 1), 5)
        return Review(
            id=self.id,
            guest_name=self.guest_name,
            rating=rating,
            comment=self.comment,
            created_at=self.created_at,
        )

    @classmethod
    def from_model(cls, review: Review) -> "ReviewPayloadV1":
        return cls(**review.model_dump())

    def to_request(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude={"id"}, exclude_none=True)


# ---------------------------------------------------------------------------
# Form schema
# ---------------------------------------------------------------------------

_REQUIRED_MESSAGES = {
    "guest_name": "Guest name is required",
    "comment": "Comment is required",
    "created_at": "Date is required",
}


class ReviewForm(BaseModel):
    """Add/edit review form."""

    model_config = FORM_CONFIG

    guest_name: str = ""
    rating: int = 5
    comment: str = ""
    created_at: FormDate = Field(default_factory=date.today)

    @field_validator(*_REQUIRED_MESSAGES, mode="after")
    @classmethod
    def _required(cls, value: Any, info: ValidationInfo) -> Any:
        if is_blank(value):
            reject(_REQUIRED_MESSAGES[info.field_name])
        return value

    @field_validator("rating", mode="after")
    @classmethod
    def _rating_in_range(cls, value: int) -> int:
        if not 1 <= value <= 5:
            reject("Rating must be between 1 and 5")
        return value

    def to_model(self, record_id: str | None = None, previous: Review | None = None) -> Review:
        return Review(id=record_id, **self.model_dump())

    @classmethod
    def from_model(cls, review: Review) -> dict[str, Any]:
        return review.model_dump(exclude={"id"})
