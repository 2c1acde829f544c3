"""Contract and contract-tenant model module."""

from __future__ import annotations

from datetime import date, datetime

from sqlalchemy import Boolean, Date, DateTime, Enum, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from boardinghouse.models.base import AuditMixin, Base
from boardinghouse.models.enums import ContractStatus


class Contract(Base, AuditMixin):
    __tablename__ = "contracts"
    __table_args__ = (
        Index("idx_contracts_room_status", "room_id", "status"),
        Index("idx_contracts_end_date", "end_date"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    contract_number: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    room_id: Mapped[int] = mapped_column(ForeignKey("rooms.id", ondelete="RESTRICT"), nullable=False)
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)
    deposit: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    # NULL until the first check-in.
    status: Mapped[ContractStatus | None] = mapped_column(Enum(ContractStatus, name="contract_status"))
    status_reason: Mapped[str | None] = mapped_column(Text)
    checked_in_at: Mapped[datetime | None] = mapped_column(DateTime)
    terminated_at: Mapped[datetime | None] = mapped_column(DateTime)
    version: Mapped[int] = mapped_column(Integer, nullable=False)

    room = relationship("Room", back_populates="contracts")
    tenants = relationship(
        "ContractTenant",
        back_populates="contract",
        cascade="all, delete-orphan",
        order_by=lambda: ContractTenant.is_primary.desc(),
    )
    bills = relationship("Bill", back_populates="contract", cascade="all, delete-orphan")

    __mapper_args__ = {"version_id_col": version}

    @property
    def primary_tenant(self):
        return next((link.tenant for link in self.tenants if link.is_primary), None)


class ContractTenant(Base):
    __tablename__ = "contract_tenants"

    contract_id: Mapped[int] = mapped_column(ForeignKey("contracts.id", ondelete="CASCADE"), primary_key=True)
    tenant_id: Mapped[int] = mapped_column(ForeignKey("tenants.id", ondelete="RESTRICT"), primary_key=True)
    is_primary: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    contract = relationship("Contract", back_populates="tenants")
    tenant = relationship("Tenant", back_populates="contracts")
