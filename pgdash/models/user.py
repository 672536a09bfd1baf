"""Session user: the staff account returned by a successful login."""

from pydantic import BaseModel, ConfigDict


class SessionUser(BaseModel):
    """Authenticated staff member. Held in memory for the session only."""

    model_config = ConfigDict(frozen=True)

    id: str
    email: str
    name: str | None = None

    @property
    def display_name(self) -> str:
        return self.name or self.email

    def __repr__(self) -> str:
        return f"<SessionUser id={self.id} email={self.email!r}>"
