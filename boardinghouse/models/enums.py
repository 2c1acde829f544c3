"""Canonical enum values for the boarding house schema."""

from __future__ import annotations

import enum


class UserRole(str, enum.Enum):
    ADMIN = "ADMIN"
    MANAGER = "MANAGER"


class RoomStatus(str, enum.Enum):
    AVAILABLE = "AVAILABLE"
    OCCUPIED = "OCCUPIED"
    RESERVED = "RESERVED"
    MAINTENANCE = "MAINTENANCE"


class ContractStatus(str, enum.Enum):
    ACTIVE = "ACTIVE"
    EXPIRED = "EXPIRED"
    TERMINATED = "TERMINATED"


class ContractBadge(str, enum.Enum):
    """Display refinement of the stored contract status."""

    ACTIVE = "ACTIVE"
    ACTIVE_EXPIRING_SOON = "ACTIVE_EXPIRING_SOON"
    EXPIRED = "EXPIRED"
    TERMINATED = "TERMINATED"


class BillStatus(str, enum.Enum):
    UNPAID = "UNPAID"
    PAID = "PAID"
    OVERDUE = "OVERDUE"


class ResidencyType(str, enum.Enum):
    TEMPORARY_RESIDENCE = "TEMPORARY_RESIDENCE"
    TEMPORARY_ABSENCE = "TEMPORARY_ABSENCE"


class ReportType(str, enum.Enum):
    REVENUE = "revenue"
    OCCUPANCY = "occupancy"
    BILLS = "bills"


class ExportFormat(str, enum.Enum):
    PDF = "pdf"
    EXCEL = "excel"
