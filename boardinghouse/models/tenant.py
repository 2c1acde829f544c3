"""Tenant model module."""

from __future__ import annotations

from datetime import date

from sqlalchemy import Date, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from boardinghouse.models.base import AuditMixin, Base


class Tenant(Base, AuditMixin):
    __tablename__ = "tenants"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    full_name: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[str] = mapped_column(String(32), nullable=False)
    id_card: Mapped[str] = mapped_column(String(32), unique=True, nullable=False)
    date_of_birth: Mapped[date | None] = mapped_column(Date)
    hometown: Mapped[str | None] = mapped_column(String(255))

    contracts = relationship("ContractTenant", back_populates="tenant")
    residency_records = relationship(
        "ResidencyRecord", back_populates="tenant", cascade="all, delete-orphan"
    )
