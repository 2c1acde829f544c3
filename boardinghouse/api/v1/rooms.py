"""Room endpoints for API v1."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Header, Query, status
from sqlalchemy.orm import Session

from boardinghouse.api.v1._authz import authorize
from boardinghouse.core.dependencies import get_db_session
from boardinghouse.models import RoomStatus
from boardinghouse.schemas.rooms import RoomCreateRequest, RoomResponse, RoomStatusUpdateRequest, RoomUpdateRequest
from boardinghouse.services.room_service import RoomService

router = APIRouter(prefix="/rooms", tags=["rooms"])


@router.get("", response_model=list[RoomResponse])
def list_rooms(
    room_status: RoomStatus | None = Query(default=None, alias="status"),
    floor: int | None = Query(default=None, ge=1),
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> list[RoomResponse]:
    authorize(authorization, scopes=["rooms.read"])
    rooms = RoomService(db=db).list_rooms(status=room_status, floor=floor)
    return [RoomResponse.model_validate(room) for room in rooms]


@router.post("", response_model=RoomResponse, status_code=status.HTTP_201_CREATED)
def create_room(
    payload: RoomCreateRequest,
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> RoomResponse:
    authorize(authorization, scopes=["rooms.write"])
    room = RoomService(db=db).create_room(**payload.model_dump())
    return RoomResponse.model_validate(room)


@router.get("/{room_id}", response_model=RoomResponse)
def get_room(
    room_id: int,
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> RoomResponse:
    authorize(authorization, scopes=["rooms.read"])
    return RoomResponse.model_validate(RoomService(db=db).get_room(room_id))


@router.put("/{room_id}", response_model=RoomResponse)
def update_room(
    room_id: int,
    payload: RoomUpdateRequest,
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> RoomResponse:
    authorize(authorization, scopes=["rooms.write"])
    room = RoomService(db=db).update_room(room_id, **payload.model_dump(exclude_unset=True))
    return RoomResponse.model_validate(room)


@router.patch("/{room_id}/status", response_model=RoomResponse)
def set_room_status(
    room_id: int,
    payload: RoomStatusUpdateRequest,
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> RoomResponse:
    authorize(authorization, scopes=["rooms.write"])
    room = RoomService(db=db).set_status(room_id, payload.status)
    return RoomResponse.model_validate(room)


@router.delete("/{room_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_room(
    room_id: int,
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> None:
    authorize(authorization, scopes=["rooms.write"])
    RoomService(db=db).delete_room(room_id)
