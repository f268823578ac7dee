"""
Response envelope shared by every endpoint.
"""

from __future__ import annotations

from typing import Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    success: bool = True
    message: str = ""
    data: T | None = None
    errors: list[str] = Field(default_factory=list)


def ok(data: T | None = None, message: str = "") -> ApiResponse[T]:
    return ApiResponse(success=True, message=message, data=data)
