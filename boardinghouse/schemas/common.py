"""Common schema module."""

from __future__ import annotations

from pydantic import BaseModel


class ErrorEnvelope(BaseModel):
    error_code: str
    detail: str
    field: str | None = None


class CountResponse(BaseModel):
    count: int
