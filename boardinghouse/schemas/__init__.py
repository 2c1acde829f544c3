"""Pydantic schema package for API contracts."""

from boardinghouse.schemas.auth import ChangePasswordRequest, LoginRequest, RefreshRequest, TokenResponse, UserResponse
from boardinghouse.schemas.bills import (
    BillCreateRequest,
    BillGenerateRequest,
    BillGenerateResponse,
    BillPayRequest,
    BillResponse,
    BillStatsResponse,
    BillUpdateRequest,
)
from boardinghouse.schemas.common import CountResponse, ErrorEnvelope
from boardinghouse.schemas.contracts import (
    ContractCheckoutRequest,
    ContractCreateRequest,
    ContractNumberResponse,
    ContractResponse,
    ContractStatsResponse,
    ContractStatusUpdateRequest,
    ContractTenantResponse,
    ContractUpdateRequest,
    ExpireSweepResponse,
)
from boardinghouse.schemas.reports import DashboardStatsResponse, ReportResponse, ReportSummaryResponse
from boardinghouse.schemas.residency import ResidencyCreateRequest, ResidencyResponse, ResidencyUpdateRequest
from boardinghouse.schemas.rooms import RoomCreateRequest, RoomResponse, RoomStatusUpdateRequest, RoomUpdateRequest
from boardinghouse.schemas.tenants import (
    TenantContractHistoryItem,
    TenantCreateRequest,
    TenantHistoryResponse,
    TenantResponse,
    TenantUpdateRequest,
)

__all__ = [
    "BillCreateRequest",
    "BillGenerateRequest",
    "BillGenerateResponse",
    "BillPayRequest",
    "BillResponse",
    "BillStatsResponse",
    "BillUpdateRequest",
    "ChangePasswordRequest",
    "ContractCheckoutRequest",
    "ContractCreateRequest",
    "ContractNumberResponse",
    "ContractResponse",
    "ContractStatsResponse",
    "ContractStatusUpdateRequest",
    "ContractTenantResponse",
    "ContractUpdateRequest",
    "CountResponse",
    "DashboardStatsResponse",
    "ErrorEnvelope",
    "ExpireSweepResponse",
    "LoginRequest",
    "RefreshRequest",
    "ReportResponse",
    "ReportSummaryResponse",
    "ResidencyCreateRequest",
    "ResidencyResponse",
    "ResidencyUpdateRequest",
    "RoomCreateRequest",
    "RoomResponse",
    "RoomStatusUpdateRequest",
    "RoomUpdateRequest",
    "TenantContractHistoryItem",
    "TenantCreateRequest",
    "TenantHistoryResponse",
    "TenantResponse",
    "TenantUpdateRequest",
    "TokenResponse",
    "UserResponse",
]
