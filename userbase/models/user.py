from __future__ import annotations

import re
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

BCRYPT_MAX_BYTES = 72

PUBLIC_FIELDS = ("id", "name", "username", "email", "created_at", "updated_at")

_USERNAME_RE = re.compile(r"^[A-Za-z0-9_.-]+$")
_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


class PublicUser(BaseModel):
    """User fields that are safe to send to a client."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: int | None = None
    name: str
    username: str
    email: str
    created_at: datetime | None = None
    updated_at: datetime | None = None


class User(PublicUser):
    password_hash: str = ""

    def to_public(self) -> PublicUser:
        return PublicUser.model_validate(self.model_dump(include=set(PUBLIC_FIELDS)))


class _UserPayload(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    username: str = Field(min_length=3, max_length=50)
    email: str = Field(max_length=255)

    @field_validator("name", mode="before")
    @classmethod
    def _strip_name(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("username")
    @classmethod
    def _check_username(cls, v: str) -> str:
        if not _USERNAME_RE.match(v):
            raise ValueError("may only contain letters, digits, '_', '.' and '-'")
        return v

    @field_validator("email")
    @classmethod
    def _check_email(cls, v: str) -> str:
        v = v.strip().lower()
        if not _EMAIL_RE.match(v):
            raise ValueError("is not a valid email address")
        return v


def _check_password_bytes(v: str | None) -> str | None:
    # bcrypt rejects input longer than 72 bytes.
    if v is not None and len(v.encode()) > BCRYPT_MAX_BYTES:
        raise ValueError(f"must be at most {BCRYPT_MAX_BYTES} bytes when UTF-8 encoded")
    return v


class UserCreate(_UserPayload):
    password: str = Field(min_length=6, max_length=72)

    @field_validator("password")
    @classmethod
    def _password_fits_bcrypt(cls, v):
        return _check_password_bytes(v)


class UserUpdate(_UserPayload):
    password: str | None = Field(default=None, min_length=6, max_length=72)

    @field_validator("password")
    @classmethod
    def _password_fits_bcrypt(cls, v):
        return _check_password_bytes(v)

    @field_validator("password", mode="before")
    @classmethod
    def _blank_password_is_omitted(cls, v):
        if isinstance(v, str) and not v:
            return None
        return v
