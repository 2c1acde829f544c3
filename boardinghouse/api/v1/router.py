"""Root API router for v1 endpoints."""

from __future__ import annotations

from fastapi import APIRouter

from boardinghouse.api.v1 import auth, bills, contracts, dashboard, health, reports, residency_records, rooms, tenants
from boardinghouse.core.config import get_config

api_router = APIRouter(prefix=get_config().API_PREFIX)
api_router.include_router(health.router)
api_router.include_router(auth.router)
api_router.include_router(rooms.router)
api_router.include_router(tenants.router)
api_router.include_router(contracts.router)
api_router.include_router(bills.router)
api_router.include_router(residency_records.router)
api_router.include_router(reports.router)
api_router.include_router(dashboard.router)


def get_api_router() -> APIRouter:
    return api_router
