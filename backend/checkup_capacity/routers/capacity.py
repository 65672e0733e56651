# backend/checkup_capacity/routers/capacity.py
"""
Capacity API endpoints.

GET /capacity?month=YYYY-MM                   - OPEN/CLOSED per day (basic only)
GET /capacity?from=..&to=..&resources=..      - cap/used/closed per day and resource
GET /capacity/calendar?month=YYYY-MM          - admin month view (no caching)
PUT /capacity/day                             - close/reopen one resource on one date
"""

import re
from datetime import date, datetime
from typing import Optional

from fastapi import APIRouter, Depends, Header, Query
from fastapi.responses import JSONResponse

from ..dependencies import get_availability_service, get_repository, get_tenant_id
from ..errors import InvalidMonth, InvalidRange, NO_STORE
from ..schemas.capacity import DayToggleRequest, DayToggleResponse
from ..services.capacity import (
    AvailabilityService,
    CapacityRepository,
    OverrideStore,
    conditional_json_response,
)
from ..services.capacity.resolver import days_payload
from ..services.capacity.resources import parse_resource_list, normalize_resource_key


router = APIRouter(prefix="/capacity", tags=["capacity"])

_MONTH = re.compile(r"^(\d{4})-(\d{2})$")
_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def parse_month(value: str) -> tuple[int, int]:
    m = _MONTH.match(value.strip())
    if not m:
        raise InvalidMonth(value)
    year, month = int(m.group(1)), int(m.group(2))
    if not 1 <= month <= 12 or year < 1:
        raise InvalidMonth(value)
    if (year, month) == (date.max.year, date.max.month):
        # the window needs an exclusive bound past its last day
        raise InvalidMonth(value)
    return year, month


def parse_day(value: str | None) -> date | None:
    value = (value or "").strip()
    if not _DATE.match(value):
        return None
    try:
        day = datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError:
        return None
    return day if day < date.max else None


@router.get("")
def get_capacity(
    month: Optional[str] = None,
    from_date: Optional[str] = Query(None, alias="from"),
    to_date: Optional[str] = Query(None, alias="to"),
    resources: Optional[str] = None,
    if_none_match: Optional[str] = Header(None),
    tenant_id: int = Depends(get_tenant_id),
    service: AvailabilityService = Depends(get_availability_service),
):
    """Public availability read; month view or detailed range view."""
    month = (month or "").strip()
    if month and not (from_date or "").strip() and not (to_date or "").strip():
        year, mon = parse_month(month)
        statuses = service.month(tenant_id, year, mon)
        data = {day.isoformat(): status for day, status in statuses.items()}
        return conditional_json_response(data, if_none_match, service.config)

    start = parse_day(from_date)
    end = parse_day(to_date)
    if start is None or end is None or end < start:
        raise InvalidRange(f"{from_date!r}..{to_date!r}")
    if (end - start).days + 1 > service.config.max_range_days:
        raise InvalidRange(f"range longer than {service.config.max_range_days} days")

    keys = parse_resource_list(resources)
    states = service.detailed(tenant_id, start, end, keys)
    data = {"ok": True, "days": days_payload(states)}
    return conditional_json_response(data, if_none_match, service.config)


@router.get("/calendar")
def get_admin_calendar(
    month: str = "",
    tenant_id: int = Depends(get_tenant_id),
    service: AvailabilityService = Depends(get_availability_service),
):
    """Admin month view with resolved and hard closures per resource."""
    year, mon = parse_month(month)
    days = service.admin_calendar(tenant_id, year, mon)
    return JSONResponse(
        content={"ok": True, "days": days},
        headers={"Cache-Control": NO_STORE},
    )


@router.put("/day", response_model=DayToggleResponse)
def put_capacity_day(
    data: DayToggleRequest,
    tenant_id: int = Depends(get_tenant_id),
    repo: CapacityRepository = Depends(get_repository),
):
    """Close or reopen one resource on one date (idempotent upsert)."""
    day = datetime.strptime(data.date, "%Y-%m-%d").date()
    resource = normalize_resource_key(data.resource)

    obj = OverrideStore(repo).upsert(tenant_id, day, resource, data.close)

    return DayToggleResponse(
        date=day.isoformat(),
        resource=obj.resource_key,
        closed=bool(obj.is_closed),
    )
