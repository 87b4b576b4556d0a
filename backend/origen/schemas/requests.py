"""Request Schemas — API payloads that are not whole entities."""

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from origen.core.domain_types import MovementDirection, PendingStatus, Theme, UserRole
from origen.schemas.entities import Movement


class _Request(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PriceUpdate(_Request):
    price: float = Field(ge=0)


class StatusUpdate(_Request):
    status: PendingStatus


class LoginRequest(_Request):
    username: str = Field(min_length=1, max_length=64)
    password: str = Field(min_length=1, max_length=256)

    @field_validator("username")
    @classmethod
    def strip_username(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("username cannot be empty or whitespace")
        return v


class RegisterRequest(LoginRequest):
    role: UserRole = UserRole.USER
    full_name: str = Field("", max_length=200)


class ThemeUpdate(_Request):
    theme: Theme


class NewMovement(_Request):
    """Ledger entry as submitted; id and date default when omitted."""
    code: str = Field(min_length=1, max_length=64)
    direction: MovementDirection
    quantity: int = Field(gt=0)
    date: str | None = None

    def to_entity(self) -> Movement:
        return Movement(**self.model_dump(exclude_none=True))
