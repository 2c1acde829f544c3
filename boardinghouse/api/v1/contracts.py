"""Contract endpoints for API v1, including the status transitions."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Header, Query, status
from sqlalchemy.orm import Session

from boardinghouse.api.v1._authz import authorize
from boardinghouse.core.dependencies import get_db_session
from boardinghouse.models import Contract, ContractStatus
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
from boardinghouse.services.contract_service import ContractService

router = APIRouter(prefix="/contracts", tags=["contracts"])


def _to_response(service: ContractService, contract: Contract) -> ContractResponse:
    timing = service.describe(contract)
    return ContractResponse(
        id=contract.id,
        contract_number=contract.contract_number,
        room_id=contract.room_id,
        room_number=contract.room.number,
        start_date=contract.start_date,
        end_date=contract.end_date,
        deposit=contract.deposit,
        status=contract.status,
        status_reason=contract.status_reason,
        checked_in_at=contract.checked_in_at,
        terminated_at=contract.terminated_at,
        version=contract.version,
        tenants=[
            ContractTenantResponse(tenant_id=link.tenant_id, full_name=link.tenant.full_name, is_primary=link.is_primary)
            for link in contract.tenants
        ],
        badge=timing.badge,
        is_expired=timing.is_expired,
        is_expiring_soon=timing.is_expiring_soon,
        remaining_days=timing.remaining_days,
        duration_days=timing.duration_days,
        allowed_transitions=timing.allowed_transitions,
    )


@router.get("", response_model=list[ContractResponse])
def list_contracts(
    contract_status: ContractStatus | None = Query(default=None, alias="status"),
    pending: bool = Query(default=False),
    room_id: int | None = Query(default=None, ge=1),
    tenant_id: int | None = Query(default=None, ge=1),
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> list[ContractResponse]:
    authorize(authorization, scopes=["contracts.read"])
    service = ContractService(db=db)
    contracts = service.list_contracts(
        status=contract_status, room_id=room_id, tenant_id=tenant_id, pending_only=pending
    )
    return [_to_response(service, contract) for contract in contracts]


@router.post("", response_model=ContractResponse, status_code=status.HTTP_201_CREATED)
def create_contract(
    payload: ContractCreateRequest,
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> ContractResponse:
    authorize(authorization, scopes=["contracts.write"])
    service = ContractService(db=db)
    contract = service.create_contract(**payload.model_dump())
    return _to_response(service, contract)


@router.get("/stats", response_model=ContractStatsResponse)
def contract_stats(
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> ContractStatsResponse:
    authorize(authorization, scopes=["contracts.read"])
    return ContractStatsResponse(**ContractService(db=db).contract_stats())


@router.get("/generate-number", response_model=ContractNumberResponse)
def generate_contract_number(
    year: int | None = Query(default=None, ge=2000, le=2100),
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> ContractNumberResponse:
    authorize(authorization, scopes=["contracts.write"])
    return ContractNumberResponse(contract_number=ContractService(db=db).generate_contract_number(year))


@router.post("/expire-overdue", response_model=ExpireSweepResponse)
def expire_overdue_contracts(
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> ExpireSweepResponse:
    authorize(authorization, scopes=["contracts.transition"])
    expired = ContractService(db=db).expire_overdue_contracts()
    return ExpireSweepResponse(expired=len(expired), contract_ids=[contract.id for contract in expired])


@router.get("/{contract_id}", response_model=ContractResponse)
def get_contract(
    contract_id: int,
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> ContractResponse:
    authorize(authorization, scopes=["contracts.read"])
    service = ContractService(db=db)
    return _to_response(service, service.get_contract(contract_id))


@router.put("/{contract_id}", response_model=ContractResponse)
def update_contract(
    contract_id: int,
    payload: ContractUpdateRequest,
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> ContractResponse:
    authorize(authorization, scopes=["contracts.write"])
    service = ContractService(db=db)
    contract = service.update_contract(contract_id, **payload.model_dump(exclude_unset=True))
    return _to_response(service, contract)


@router.post("/{contract_id}/checkin", response_model=ContractResponse)
def check_in(
    contract_id: int,
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> ContractResponse:
    authorize(authorization, scopes=["contracts.transition"])
    service = ContractService(db=db)
    return _to_response(service, service.check_in(contract_id))


@router.post("/{contract_id}/checkout", response_model=ContractResponse)
def check_out(
    contract_id: int,
    payload: ContractCheckoutRequest | None = None,
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> ContractResponse:
    authorize(authorization, scopes=["contracts.transition"])
    service = ContractService(db=db)
    reason = payload.reason if payload is not None else None
    return _to_response(service, service.check_out(contract_id, reason=reason))


@router.patch("/{contract_id}/status", response_model=ContractResponse)
def update_status(
    contract_id: int,
    payload: ContractStatusUpdateRequest,
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> ContractResponse:
    authorize(authorization, scopes=["contracts.transition"])
    service = ContractService(db=db)
    contract = service.update_status(contract_id, payload.status, reason=payload.reason)
    return _to_response(service, contract)


@router.delete("/{contract_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_contract(
    contract_id: int,
    confirm: str | None = Query(default=None, max_length=64),
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> None:
    authorize(authorization, scopes=["contracts.delete"])
    ContractService(db=db).delete_contract(contract_id, confirm_contract_number=confirm)
