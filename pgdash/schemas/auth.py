"""Pydantic v2 schemas for the login endpoint."""

from pydantic import AliasChoices, BaseModel, Field

from pgdash.models.user import SessionUser
from pgdash.schemas.common import WIRE_CONFIG, RequiredWireId

# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class LoginRequest(BaseModel):
    """Body for ``POST /loginWithEmail``."""

    email: str
    password: str


# ---------------------------------------------------------------------------
# Response schemas (v1)
# ---------------------------------------------------------------------------


class UserPayloadV1(BaseModel):
    """Staff account returned alongside the token."""

    model_config = WIRE_CONFIG

    id: RequiredWireId = Field(validation_alias=AliasChoices("id", "_id"))
    email: str = Field(..., min_length=1)
    name: str | None = None

    def to_model(self) -> SessionUser:
        return SessionUser(id=self.id, email=self.email, name=self.name or None)


class LoginResponseV1(BaseModel):
    """Successful login payload. Both ``token`` and ``user`` must be present."""

    model_config = WIRE_CONFIG

    token: str = Field(..., min_length=1)
    user: UserPayloadV1
