# backend/checkup_capacity/routers/settings.py
# Tenant-wide default capacity. Used only when no slot template matches a day.

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from ..dependencies import get_repository, get_tenant_id
from ..errors import InvalidDefaults, NO_STORE
from ..schemas.capacity import CapacityDefaultsRead, CapacityDefaultsUpdate
from ..services.capacity import CapacityRepository

router = APIRouter(prefix="/capacity/settings", tags=["capacity-settings"])

_FIELDS = {
    "BASIC": "basic_cap",
    "NHIS": "nhis_cap",
    "SPECIAL": "special_cap",
}


def _read(obj) -> CapacityDefaultsRead:
    if obj is None:
        return CapacityDefaultsRead()
    return CapacityDefaultsRead(
        BASIC=obj.basic_cap or 0,
        NHIS=obj.nhis_cap or 0,
        SPECIAL=obj.special_cap or 0,
    )


@router.get("/defaults", response_model=CapacityDefaultsRead)
def get_capacity_defaults(
    tenant_id: int = Depends(get_tenant_id),
    repo: CapacityRepository = Depends(get_repository),
):
    body = _read(repo.get_capacity_default(tenant_id))
    return JSONResponse(content=body.model_dump(), headers={"Cache-Control": NO_STORE})


@router.put("/defaults", response_model=CapacityDefaultsRead)
def put_capacity_defaults(
    data: CapacityDefaultsUpdate,
    tenant_id: int = Depends(get_tenant_id),
    repo: CapacityRepository = Depends(get_repository),
):
    values = {}
    for key, value in data.model_dump(exclude_none=True).items():
        if value < 0:
            raise InvalidDefaults(f"{key} must be >= 0")
        values[_FIELDS[key]] = value

    obj = repo.save_capacity_default(tenant_id, values)
    return _read(obj)
