"""Bill model module."""

from __future__ import annotations

from datetime import date

from sqlalchemy import Date, Enum, ForeignKey, Index, Integer, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from boardinghouse.models.base import AuditMixin, Base
from boardinghouse.models.enums import BillStatus


class Bill(Base, AuditMixin):
    __tablename__ = "bills"
    __table_args__ = (
        UniqueConstraint("contract_id", "month", "year", name="uq_bills_contract_period"),
        Index("idx_bills_period", "year", "month"),
        Index("idx_bills_status", "status"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    contract_id: Mapped[int] = mapped_column(ForeignKey("contracts.id", ondelete="CASCADE"), nullable=False)
    room_id: Mapped[int] = mapped_column(ForeignKey("rooms.id", ondelete="RESTRICT"), nullable=False)
    month: Mapped[int] = mapped_column(Integer, nullable=False)
    year: Mapped[int] = mapped_column(Integer, nullable=False)
    rent_amount: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    electric_amount: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    water_amount: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    service_amount: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_amount: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    status: Mapped[BillStatus] = mapped_column(
        Enum(BillStatus, name="bill_status"), default=BillStatus.UNPAID, nullable=False
    )
    due_date: Mapped[date] = mapped_column(Date, nullable=False)
    paid_date: Mapped[date | None] = mapped_column(Date)
    notes: Mapped[str | None] = mapped_column(Text)

    contract = relationship("Contract", back_populates="bills")
    room = relationship("Room")
