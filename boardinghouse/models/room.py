"""Room model module."""

from __future__ import annotations

from sqlalchemy import Enum, Float, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from boardinghouse.models.base import AuditMixin, Base
from boardinghouse.models.enums import RoomStatus


class Room(Base, AuditMixin):
    __tablename__ = "rooms"
    __table_args__ = (Index("idx_rooms_status", "status"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    number: Mapped[str] = mapped_column(String(32), unique=True, nullable=False)
    floor: Mapped[int] = mapped_column(Integer, nullable=False)
    area: Mapped[float] = mapped_column(Float, nullable=False)
    capacity: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    base_price: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[RoomStatus] = mapped_column(
        Enum(RoomStatus, name="room_status"), default=RoomStatus.AVAILABLE, nullable=False
    )
    version: Mapped[int] = mapped_column(Integer, nullable=False)

    contracts = relationship("Contract", back_populates="room")

    __mapper_args__ = {"version_id_col": version}
