"""Bill endpoints for API v1."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Header, Query, status
from sqlalchemy.orm import Session

from boardinghouse.api.v1._authz import authorize
from boardinghouse.core.dependencies import get_db_session
from boardinghouse.models import BillStatus
from boardinghouse.schemas.bills import (
    BillCreateRequest,
    BillGenerateRequest,
    BillGenerateResponse,
    BillPayRequest,
    BillResponse,
    BillStatsResponse,
    BillUpdateRequest,
)
from boardinghouse.schemas.common import CountResponse
from boardinghouse.services.bill_service import BillService

router = APIRouter(prefix="/bills", tags=["bills"])


@router.get("", response_model=list[BillResponse])
def list_bills(
    bill_status: BillStatus | None = Query(default=None, alias="status"),
    contract_id: int | None = Query(default=None, ge=1),
    room_id: int | None = Query(default=None, ge=1),
    month: int | None = Query(default=None, ge=1, le=12),
    year: int | None = Query(default=None),
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> list[BillResponse]:
    authorize(authorization, scopes=["bills.read"])
    bills = BillService(db=db).list_bills(
        status=bill_status, contract_id=contract_id, room_id=room_id, month=month, year=year
    )
    return [BillResponse.model_validate(bill) for bill in bills]


@router.post("", response_model=BillResponse, status_code=status.HTTP_201_CREATED)
def create_bill(
    payload: BillCreateRequest,
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> BillResponse:
    authorize(authorization, scopes=["bills.write"])
    return BillResponse.model_validate(BillService(db=db).create_bill(**payload.model_dump()))


@router.get("/stats", response_model=BillStatsResponse)
def bill_stats(
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> BillStatsResponse:
    authorize(authorization, scopes=["bills.read"])
    return BillStatsResponse(**BillService(db=db).bill_stats())


@router.post("/generate", response_model=BillGenerateResponse, status_code=status.HTTP_201_CREATED)
def generate_bills(
    payload: BillGenerateRequest,
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> BillGenerateResponse:
    authorize(authorization, scopes=["bills.write"])
    result = BillService(db=db).generate_monthly_bills(month=payload.month, year=payload.year)
    return BillGenerateResponse(
        month=result.month,
        year=result.year,
        generated=len(result.generated),
        skipped_contract_ids=result.skipped_contract_ids,
    )


@router.post("/mark-overdue", response_model=CountResponse)
def mark_overdue(
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> CountResponse:
    authorize(authorization, scopes=["bills.write"])
    return CountResponse(count=BillService(db=db).mark_overdue_bills())


@router.get("/{bill_id}", response_model=BillResponse)
def get_bill(
    bill_id: int,
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> BillResponse:
    authorize(authorization, scopes=["bills.read"])
    return BillResponse.model_validate(BillService(db=db).get_bill(bill_id))


@router.put("/{bill_id}", response_model=BillResponse)
def update_bill(
    bill_id: int,
    payload: BillUpdateRequest,
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> BillResponse:
    authorize(authorization, scopes=["bills.write"])
    return BillResponse.model_validate(BillService(db=db).update_bill(bill_id, **payload.model_dump()))


@router.post("/{bill_id}/pay", response_model=BillResponse)
def pay_bill(
    bill_id: int,
    payload: BillPayRequest | None = None,
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> BillResponse:
    authorize(authorization, scopes=["bills.write"])
    payload = payload or BillPayRequest()
    bill = BillService(db=db).pay_bill(bill_id, paid_date=payload.paid_date, notes=payload.notes)
    return BillResponse.model_validate(bill)


@router.delete("/{bill_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_bill(
    bill_id: int,
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> None:
    authorize(authorization, scopes=["bills.write"])
    BillService(db=db).delete_bill(bill_id)
