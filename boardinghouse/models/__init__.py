"""SQLAlchemy model package for the boarding house schema."""

from boardinghouse.models.base import Base
from boardinghouse.models.bill import Bill
from boardinghouse.models.contract import Contract, ContractTenant
from boardinghouse.models.enums import (
    BillStatus,
    ContractBadge,
    ContractStatus,
    ExportFormat,
    ReportType,
    ResidencyType,
    RoomStatus,
    UserRole,
)
from boardinghouse.models.residency_record import ResidencyRecord
from boardinghouse.models.room import Room
from boardinghouse.models.tenant import Tenant
from boardinghouse.models.user import User

__all__ = [
    "Base",
    "Bill",
    "BillStatus",
    "Contract",
    "ContractBadge",
    "ContractStatus",
    "ContractTenant",
    "ExportFormat",
    "ReportType",
    "ResidencyRecord",
    "ResidencyType",
    "Room",
    "RoomStatus",
    "Tenant",
    "User",
    "UserRole",
]
