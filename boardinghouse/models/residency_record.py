"""Residency record model module."""

from __future__ import annotations

from datetime import date

from sqlalchemy import Date, Enum, ForeignKey, Index, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from boardinghouse.models.base import AuditMixin, Base
from boardinghouse.models.enums import ResidencyType


class ResidencyRecord(Base, AuditMixin):
    __tablename__ = "residency_records"
    __table_args__ = (Index("idx_residency_records_tenant", "tenant_id"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    tenant_id: Mapped[int] = mapped_column(ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False)
    type: Mapped[ResidencyType] = mapped_column(Enum(ResidencyType, name="residency_type"), nullable=False)
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date | None] = mapped_column(Date)
    notes: Mapped[str | None] = mapped_column(Text)

    tenant = relationship("Tenant", back_populates="residency_records")

    def is_active_on(self, today: date) -> bool:
        if self.start_date > today:
            return False
        return self.end_date is None or self.end_date >= today
