"""
Pydantic models for user data.

``UserCreate`` and ``UserUpdate`` describe request bodies, ``UserRead``
and ``UserList`` describe responses.  ``ErrorResponse`` is the body of
every error answered by the API.

Emails in request bodies must be well formed addresses.  The empty
string is let through so that the service answers it with
``INVALID_INPUT``; the value is stored exactly as sent, without the
normalisation the validator would apply.
"""

from datetime import datetime
from typing import List, Optional

from email_validator import EmailNotValidError, validate_email
from pydantic import BaseModel, ConfigDict, Field, field_validator


def _check_email_format(value: Optional[str]) -> Optional[str]:
    if value:
        try:
            validate_email(value, check_deliverability=False)
        except EmailNotValidError as exc:
            raise ValueError(f"value is not a valid email address: {exc}") from exc
    return value


class UserCreate(BaseModel):
    """Schema for creating a user.

    Both fields are required.  Emptiness is checked by the service so
    that ``""`` is answered with ``INVALID_INPUT`` rather than a schema
    error.
    """

    name: str = Field(..., examples=["Alice Johnson"])
    email: str = Field(..., examples=["alice@example.com"])

    @field_validator("email")
    @classmethod
    def check_email_format(cls, value):
        return _check_email_format(value)


class UserUpdate(BaseModel):
    """Schema for a partial update.

    An omitted field (or ``null``) leaves the stored value unchanged.
    A provided value replaces it and must not be empty.
    """

    name: Optional[str] = Field(None, examples=["Alice Johnson-Smith"])
    email: Optional[str] = Field(None, examples=["alice.smith@example.com"])

    @field_validator("email")
    @classmethod
    def check_email_format(cls, value):
        return _check_email_format(value)


class UserRead(BaseModel):
    """Schema for reading a user from the API."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    created_at: datetime
    updated_at: datetime


class UserList(BaseModel):
    """One page of users plus the total number of users."""

    users: List[UserRead]
    total: int
    limit: int
    offset: int


class ErrorResponse(BaseModel):
    message: str
    code: str
