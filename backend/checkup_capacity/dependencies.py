# backend/checkup_capacity/dependencies.py
"""
FastAPI dependencies shared by the capacity routers.

The tenant arrives explicitly as a slug in the X-Tenant header (set by
whatever resolves tenants in front of this service).
"""

from typing import Optional

from fastapi import Depends, Header, Request
from sqlalchemy.orm import Session

from .database import get_db
from .errors import TenantNotFound
from .redis_client import redis_client
from .services.capacity import AvailabilityService, CapacityRepository, get_capacity_config


def get_repository(db: Session = Depends(get_db)) -> CapacityRepository:
    return CapacityRepository(db)


def get_redis():
    return redis_client


def get_tenant_id(
    request: Request,
    x_tenant: Optional[str] = Header(None),
    repo: CapacityRepository = Depends(get_repository),
) -> int:
    slug = (x_tenant or "").strip().lower()
    if not slug:
        raise TenantNotFound("X-Tenant header missing")
    hospital = repo.get_hospital_by_slug(slug)
    if hospital is None:
        raise TenantNotFound(f"Unknown tenant {slug!r}")
    request.state.tenant = slug
    return hospital.id


def get_availability_service(
    repo: CapacityRepository = Depends(get_repository),
    redis=Depends(get_redis),
) -> AvailabilityService:
    return AvailabilityService(repo, get_capacity_config(), redis)
