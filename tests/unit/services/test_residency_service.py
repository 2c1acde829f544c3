from __future__ import annotations

from datetime import date

import pytest

from boardinghouse.core.exceptions import NotFoundError, ValidationError
from boardinghouse.models import ResidencyType
from boardinghouse.services.residency_service import ResidencyService


def test_create_and_list_active_records(session, make_tenant):
    tenant = make_tenant()
    service = ResidencyService(db=session)
    open_ended = service.create_record(tenant.id, ResidencyType.TEMPORARY_RESIDENCE, date(2024, 1, 1))
    service.create_record(tenant.id, ResidencyType.TEMPORARY_ABSENCE, date(2024, 2, 1), end_date=date(2024, 2, 10))

    active = service.list_records(tenant_id=tenant.id, active_on=date(2024, 3, 1))

    assert [record.id for record in active] == [open_ended.id]


def test_end_date_before_start_is_rejected(session, make_tenant):
    tenant = make_tenant()
    with pytest.raises(ValidationError):
        ResidencyService(db=session).create_record(
            tenant.id, ResidencyType.TEMPORARY_RESIDENCE, date(2024, 5, 1), end_date=date(2024, 4, 1)
        )


def test_record_requires_existing_tenant(session):
    with pytest.raises(NotFoundError):
        ResidencyService(db=session).create_record(999, ResidencyType.TEMPORARY_RESIDENCE, date(2024, 1, 1))


def test_update_can_close_record(session, make_tenant):
    tenant = make_tenant()
    service = ResidencyService(db=session)
    record = service.create_record(tenant.id, ResidencyType.TEMPORARY_RESIDENCE, date(2024, 1, 1))

    updated = service.update_record(record.id, end_date=date(2024, 6, 30))

    assert updated.is_active_on(date(2024, 6, 30)) is True
    assert updated.is_active_on(date(2024, 7, 1)) is False


def test_delete_record(session, make_tenant):
    tenant = make_tenant()
    service = ResidencyService(db=session)
    record = service.create_record(tenant.id, ResidencyType.TEMPORARY_ABSENCE, date(2024, 1, 1))

    service.delete_record(record.id)

    with pytest.raises(NotFoundError):
        service.get_record(record.id)
