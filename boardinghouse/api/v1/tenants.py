"""Tenant endpoints for API v1."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Header, Query, status
from sqlalchemy.orm import Session

from boardinghouse.api.v1._authz import authorize
from boardinghouse.core.dependencies import get_db_session
from boardinghouse.schemas.bills import BillResponse
from boardinghouse.schemas.tenants import (
    TenantContractHistoryItem,
    TenantCreateRequest,
    TenantHistoryResponse,
    TenantResponse,
    TenantUpdateRequest,
)
from boardinghouse.services.tenant_service import TenantService

router = APIRouter(prefix="/tenants", tags=["tenants"])


@router.get("", response_model=list[TenantResponse])
def list_tenants(
    search: str | None = Query(default=None, max_length=255),
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> list[TenantResponse]:
    authorize(authorization, scopes=["tenants.read"])
    return [TenantResponse.model_validate(item) for item in TenantService(db=db).list_tenants(search=search)]


@router.post("", response_model=TenantResponse, status_code=status.HTTP_201_CREATED)
def create_tenant(
    payload: TenantCreateRequest,
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> TenantResponse:
    authorize(authorization, scopes=["tenants.write"])
    return TenantResponse.model_validate(TenantService(db=db).create_tenant(**payload.model_dump()))


@router.get("/{tenant_id}", response_model=TenantResponse)
def get_tenant(
    tenant_id: int,
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> TenantResponse:
    authorize(authorization, scopes=["tenants.read"])
    return TenantResponse.model_validate(TenantService(db=db).get_tenant(tenant_id))


@router.put("/{tenant_id}", response_model=TenantResponse)
def update_tenant(
    tenant_id: int,
    payload: TenantUpdateRequest,
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> TenantResponse:
    authorize(authorization, scopes=["tenants.write"])
    tenant = TenantService(db=db).update_tenant(tenant_id, **payload.model_dump(exclude_unset=True))
    return TenantResponse.model_validate(tenant)


@router.delete("/{tenant_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_tenant(
    tenant_id: int,
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> None:
    authorize(authorization, scopes=["tenants.write"])
    TenantService(db=db).delete_tenant(tenant_id)


@router.get("/{tenant_id}/history", response_model=TenantHistoryResponse)
def tenant_history(
    tenant_id: int,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=50),
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> TenantHistoryResponse:
    authorize(authorization, scopes=["tenants.read", "contracts.read"])
    history = TenantService(db=db).history(tenant_id, page=page, limit=limit)
    return TenantHistoryResponse(
        tenant=TenantResponse.model_validate(history.tenant),
        page=history.page,
        limit=history.limit,
        total=history.total,
        pages=history.pages,
        contracts=[
            TenantContractHistoryItem(
                contract_id=link.contract.id,
                contract_number=link.contract.contract_number,
                room_id=link.contract.room_id,
                room_number=link.contract.room.number,
                start_date=link.contract.start_date,
                end_date=link.contract.end_date,
                status=link.contract.status,
                is_primary=link.is_primary,
                bills=[BillResponse.model_validate(bill) for bill in link.contract.bills],
            )
            for link in history.links
        ],
    )
