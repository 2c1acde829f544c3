"""Residency record service (temporary residence / absence registrations)."""

from __future__ import annotations

import logging
from datetime import date

from sqlalchemy import select

from boardinghouse.core.exceptions import ValidationError
from boardinghouse.models import ResidencyRecord, ResidencyType, Tenant
from boardinghouse.services.base_service import BaseService

logger = logging.getLogger(__name__)


def _check_dates(start_date: date, end_date: date | None) -> None:
    if end_date is not None and end_date < start_date:
        raise ValidationError("End date must not precede start date", field="end_date")


class ResidencyService(BaseService):
    def create_record(
        self,
        tenant_id: int,
        type: ResidencyType,
        start_date: date,
        end_date: date | None = None,
        notes: str | None = None,
    ) -> ResidencyRecord:
        self._get_or_raise(Tenant, tenant_id, "Tenant")
        _check_dates(start_date, end_date)
        record = ResidencyRecord(
            tenant_id=tenant_id,
            type=ResidencyType(type),
            start_date=start_date,
            end_date=end_date,
            notes=notes,
        )
        self.db.add(record)
        self.commit()
        logger.info(
            "residency.created",
            extra={"event": "residency.created", "record_id": record.id, "tenant_id": tenant_id},
        )
        return record

    def get_record(self, record_id: int) -> ResidencyRecord:
        return self._get_or_raise(ResidencyRecord, record_id, "Residency record")

    def list_records(
        self,
        tenant_id: int | None = None,
        type: ResidencyType | None = None,
        active_on: date | None = None,
    ) -> list[ResidencyRecord]:
        query = select(ResidencyRecord).order_by(ResidencyRecord.start_date.desc(), ResidencyRecord.id.desc())
        if tenant_id is not None:
            query = query.where(ResidencyRecord.tenant_id == tenant_id)
        if type is not None:
            query = query.where(ResidencyRecord.type == type)
        records = list(self.db.scalars(query))
        if active_on is not None:
            records = [record for record in records if record.is_active_on(active_on)]
        return records

    def update_record(self, record_id: int, **fields) -> ResidencyRecord:
        record = self.get_record(record_id)
        for name in ("type", "start_date", "end_date", "notes"):
            if name not in fields:
                continue
            # end_date and notes may be cleared; type and start_date may not.
            if fields[name] is None and name in ("type", "start_date"):
                raise ValidationError(f"{name} cannot be empty", field=name)
            setattr(record, name, fields[name])
        _check_dates(record.start_date, record.end_date)
        self.commit()
        return record

    def delete_record(self, record_id: int) -> None:
        record = self.get_record(record_id)
        self.db.delete(record)
        self.commit()
        logger.info("residency.deleted", extra={"event": "residency.deleted", "record_id": record_id})
