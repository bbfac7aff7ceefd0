from __future__ import annotations

from pydantic import BaseModel, Field

from userbase.models.user import PublicUser

INTERNAL_ERROR_MESSAGE = "Internal server error"


class ServiceResult(BaseModel):
    """Response envelope returned by every service operation.

    ``status_code`` travels alongside the envelope for the transport layer and
    is never part of the serialized body.
    """

    status_code: int = Field(exclude=True)
    success: bool
    message: str
    data: PublicUser | list[PublicUser] | None = None
    errors: dict[str, str] | None = None

    @classmethod
    def ok(cls, message: str, data=None, status_code: int = 200) -> ServiceResult:
        return cls(status_code=status_code, success=True, message=message, data=data)

    @classmethod
    def fail(cls, status_code: int, message: str, errors: dict[str, str] | None = None) -> ServiceResult:
        return cls(status_code=status_code, success=False, message=message, errors=errors)

    @classmethod
    def internal_error(cls) -> ServiceResult:
        return cls.fail(500, INTERNAL_ERROR_MESSAGE)

    def body(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
