"""Review domain model."""

from datetime import date

from pydantic import BaseModel, ConfigDict, Field


class Review(BaseModel):
    """Guest feedback with a 1-5 star rating."""

    model_config = ConfigDict(frozen=True)

    id: str | None = None
    guest_name: str
    rating: int = Field(5, ge=1, le=5)
    comment: str = ""
    created_at: date | None = None
