"""Authentication-related Pydantic schemas."""

from datetime import datetime

from pydantic import EmailStr, Field, model_validator

from waitlist.schemas.common import CamelModel


class RegisterRequest(CamelModel):
    username: str = Field(..., min_length=3, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=128)
    confirm_password: str
    name: str | None = Field(None, max_length=255)
    company_name: str | None = Field(None, max_length=255)

    @model_validator(mode="after")
    def passwords_match(self) -> "RegisterRequest":
        if self.password != self.confirm_password:
            raise ValueError("Passwords don't match")
        return self


class LoginRequest(CamelModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class ProfileUpdate(CamelModel):
    name: str | None = Field(None, max_length=255)
    company_name: str | None = Field(None, max_length=255)


class AccountRead(CamelModel):
    """Account as returned to its owner. Never includes the password hash."""
    id: int
    username: str
    email: str
    name: str | None = None
    company_name: str | None = None
    created_at: datetime
