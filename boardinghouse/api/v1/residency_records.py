"""Residency record endpoints for API v1."""

from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, Header, Query, status
from sqlalchemy.orm import Session

from boardinghouse.api.v1._authz import authorize
from boardinghouse.core.dependencies import get_db_session
from boardinghouse.models import ResidencyRecord, ResidencyType
from boardinghouse.models.base import utcnow
from boardinghouse.schemas.residency import ResidencyCreateRequest, ResidencyResponse, ResidencyUpdateRequest
from boardinghouse.services.residency_service import ResidencyService

router = APIRouter(prefix="/residency-records", tags=["residency"])


def _to_response(record: ResidencyRecord, today: date | None = None) -> ResidencyResponse:
    return ResidencyResponse(
        id=record.id,
        tenant_id=record.tenant_id,
        type=record.type,
        start_date=record.start_date,
        end_date=record.end_date,
        notes=record.notes,
        is_active=record.is_active_on(today or utcnow().date()),
    )


@router.get("", response_model=list[ResidencyResponse])
def list_records(
    tenant_id: int | None = Query(default=None, ge=1),
    record_type: ResidencyType | None = Query(default=None, alias="type"),
    active: bool = Query(default=False),
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> list[ResidencyResponse]:
    authorize(authorization, scopes=["residency.read"])
    today = utcnow().date()
    records = ResidencyService(db=db).list_records(
        tenant_id=tenant_id, type=record_type, active_on=today if active else None
    )
    return [_to_response(record, today) for record in records]


@router.post("", response_model=ResidencyResponse, status_code=status.HTTP_201_CREATED)
def create_record(
    payload: ResidencyCreateRequest,
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> ResidencyResponse:
    authorize(authorization, scopes=["residency.write"])
    return _to_response(ResidencyService(db=db).create_record(**payload.model_dump()))


@router.get("/{record_id}", response_model=ResidencyResponse)
def get_record(
    record_id: int,
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> ResidencyResponse:
    authorize(authorization, scopes=["residency.read"])
    return _to_response(ResidencyService(db=db).get_record(record_id))


@router.put("/{record_id}", response_model=ResidencyResponse)
def update_record(
    record_id: int,
    payload: ResidencyUpdateRequest,
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> ResidencyResponse:
    authorize(authorization, scopes=["residency.write"])
    record = ResidencyService(db=db).update_record(record_id, **payload.model_dump(exclude_unset=True))
    return _to_response(record)


@router.delete("/{record_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_record(
    record_id: int,
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> None:
    authorize(authorization, scopes=["residency.write"])
    ResidencyService(db=db).delete_record(record_id)
