from __future__ import annotations

from boardinghouse.models import Base
import boardinghouse.models  # noqa: F401


def test_model_metadata_contains_target_tables():
    expected = {
        "users",
        "rooms",
        "tenants",
        "contracts",
        "contract_tenants",
        "bills",
        "residency_records",
    }
    assert expected == set(Base.metadata.tables.keys())


def test_contract_status_is_nullable_and_versioned():
    contracts = Base.metadata.tables["contracts"]
    assert contracts.c.status.nullable is True
    assert contracts.c.version.nullable is False
    assert Base.metadata.tables["rooms"].c.version.nullable is False


def test_bills_are_unique_per_contract_period():
    constraint_names = {constraint.name for constraint in Base.metadata.tables["bills"].constraints}
    assert "uq_bills_contract_period" in constraint_names
