"""Room service for room inventory operations."""

from __future__ import annotations

import logging

from sqlalchemy import func, select

from boardinghouse.core.exceptions import ConflictError, ValidationError
from boardinghouse.models import Bill, BillStatus, Contract, ContractStatus, Room, RoomStatus
from boardinghouse.services.base_service import BaseService

logger = logging.getLogger(__name__)

MAX_ROOM_CAPACITY = 10
_UPDATABLE_FIELDS = ("number", "floor", "area", "capacity", "base_price")


class RoomService(BaseService):
    """Service for room CRUD and manual status changes."""

    @staticmethod
    def _validate_fields(
        floor: int | None = None,
        area: float | None = None,
        capacity: int | None = None,
        base_price: int | None = None,
    ) -> None:
        if floor is not None and floor < 1:
            raise ValidationError("Floor must be at least 1", field="floor")
        if area is not None and area <= 0:
            raise ValidationError("Area must be a positive number", field="area")
        if capacity is not None and not 1 <= capacity <= MAX_ROOM_CAPACITY:
            raise ValidationError(f"Capacity must be between 1 and {MAX_ROOM_CAPACITY}", field="capacity")
        if base_price is not None and base_price <= 0:
            raise ValidationError("Base price must be a positive number", field="base_price")

    def _ensure_number_free(self, number: str, exclude_id: int | None = None) -> None:
        query = select(Room.id).where(Room.number == number)
        if exclude_id is not None:
            query = query.where(Room.id != exclude_id)
        if self.db.scalar(query) is not None:
            raise ConflictError(f"Room number {number} is already in use", field="number")

    def create_room(
        self,
        number: str,
        floor: int,
        area: float,
        capacity: int,
        base_price: int,
        status: RoomStatus = RoomStatus.AVAILABLE,
    ) -> Room:
        number = number.strip()
        if not number:
            raise ValidationError("Room number is required", field="number")
        if status is RoomStatus.OCCUPIED:
            raise ValidationError("Rooms become occupied only through contract check-in", field="status")
        self._validate_fields(floor=floor, area=area, capacity=capacity, base_price=base_price)
        self._ensure_number_free(number)

        room = Room(
            number=number,
            floor=floor,
            area=area,
            capacity=capacity,
            base_price=base_price,
            status=status,
        )
        self.db.add(room)
        self.commit()
        logger.info("room.created", extra={"event": "room.created", "room_id": room.id, "number": number})
        return room

    def get_room(self, room_id: int) -> Room:
        return self._get_or_raise(Room, room_id, "Room")

    def list_rooms(self, status: RoomStatus | None = None, floor: int | None = None) -> list[Room]:
        query = select(Room).order_by(Room.floor, Room.number)
        if status is not None:
            query = query.where(Room.status == status)
        if floor is not None:
            query = query.where(Room.floor == floor)
        return list(self.db.scalars(query))

    def update_room(self, room_id: int, **fields) -> Room:
        room = self.get_room(room_id)
        unknown = set(fields) - set(_UPDATABLE_FIELDS)
        if unknown:
            raise ValidationError(f"Unknown room fields: {', '.join(sorted(unknown))}")
        changes = {key: value for key, value in fields.items() if value is not None}
        self._validate_fields(
            floor=changes.get("floor"),
            area=changes.get("area"),
            capacity=changes.get("capacity"),
            base_price=changes.get("base_price"),
        )
        if "number" in changes:
            changes["number"] = changes["number"].strip()
            self._ensure_number_free(changes["number"], exclude_id=room.id)
        for key, value in changes.items():
            setattr(room, key, value)
        self.commit()
        return room

    def get_active_contract(self, room_id: int) -> Contract | None:
        return self.db.scalar(
            select(Contract).where(Contract.room_id == room_id, Contract.status == ContractStatus.ACTIVE)
        )

    def set_status(self, room_id: int, status: RoomStatus) -> Room:
        """Manually move a room between AVAILABLE, RESERVED and MAINTENANCE."""
        room = self.get_room(room_id)
        if status is RoomStatus.OCCUPIED:
            raise ValidationError("Rooms become occupied only through contract check-in", field="status")
        active = self.get_active_contract(room.id)
        if active is not None:
            raise ConflictError(
                f"Room {room.number} has active contract {active.contract_number}; check out first",
                field="status",
            )
        room.status = status
        self.commit()
        logger.info(
            "room.status_changed",
            extra={"event": "room.status_changed", "room_id": room.id, "status": status.value},
        )
        return room

    def delete_room(self, room_id: int) -> None:
        """Delete a room and its finished contracts (their bills and tenant links go with them)."""
        room = self.get_room(room_id)
        active = self.get_active_contract(room.id)
        if active is not None:
            raise ConflictError(
                f"Room {room.number} has active contract {active.contract_number}; check out first", field="room_id"
            )
        unpaid = self.db.scalar(
            select(func.count(Bill.id)).where(
                Bill.room_id == room.id, Bill.status.in_([BillStatus.UNPAID, BillStatus.OVERDUE])
            )
        )
        if unpaid:
            raise ConflictError(f"Room {room.number} has {unpaid} unpaid bill(s)", field="room_id")

        for bill in list(self.db.scalars(select(Bill).where(Bill.room_id == room.id))):
            self.db.delete(bill)
        contracts = list(room.contracts)
        for contract in contracts:
            self.db.delete(contract)
        self.db.delete(room)
        self.commit()
        logger.info(
            "room.deleted",
            extra={"event": "room.deleted", "room_id": room_id, "contracts_deleted": len(contracts)},
        )
