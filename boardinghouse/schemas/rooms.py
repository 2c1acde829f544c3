"""Room request/response schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from boardinghouse.models import RoomStatus


class RoomCreateRequest(BaseModel):
    number: str = Field(min_length=1, max_length=32)
    floor: int
    area: float
    capacity: int = 1
    base_price: int
    status: RoomStatus = RoomStatus.AVAILABLE


class RoomUpdateRequest(BaseModel):
    number: str | None = Field(default=None, min_length=1, max_length=32)
    floor: int | None = None
    area: float | None = None
    capacity: int | None = None
    base_price: int | None = None


class RoomStatusUpdateRequest(BaseModel):
    status: RoomStatus


class RoomResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    number: str
    floor: int
    area: float
    capacity: int
    base_price: int
    status: RoomStatus
    version: int
    created_at: datetime
    updated_at: datetime
