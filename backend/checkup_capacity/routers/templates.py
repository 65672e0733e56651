# backend/checkup_capacity/routers/templates.py
# Slot templates: every write invalidates the tenant's cached template capacity.

from fastapi import APIRouter, Depends, status

from ..dependencies import get_redis, get_repository, get_tenant_id
from ..errors import TemplateNotFound
from ..schemas.capacity import SlotTemplateCreate, SlotTemplateRead
from ..services.capacity import CapacityRepository, invalidate_template_cache

router = APIRouter(prefix="/capacity/templates", tags=["capacity-templates"])


@router.get("/", response_model=list[SlotTemplateRead])
def list_slot_templates(
    tenant_id: int = Depends(get_tenant_id),
    repo: CapacityRepository = Depends(get_repository),
):
    return repo.list_slot_templates(tenant_id)


@router.post("/", response_model=SlotTemplateRead, status_code=status.HTTP_201_CREATED)
def create_slot_template(
    data: SlotTemplateCreate,
    tenant_id: int = Depends(get_tenant_id),
    repo: CapacityRepository = Depends(get_repository),
    redis=Depends(get_redis),
):
    obj = repo.add_slot_template(tenant_id, data.dow, data.start, data.end, data.capacity)
    invalidate_template_cache(redis, tenant_id)
    return obj


@router.delete("/{id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_slot_template(
    id: int,
    tenant_id: int = Depends(get_tenant_id),
    repo: CapacityRepository = Depends(get_repository),
    redis=Depends(get_redis),
):
    obj = repo.get_slot_template(tenant_id, id)
    if not obj:
        raise TemplateNotFound(f"Slot template {id}")
    repo.delete_slot_template(obj)
    invalidate_template_cache(redis, tenant_id)


@router.post("/invalidate")
def invalidate_templates_cache(
    tenant_id: int = Depends(get_tenant_id),
    redis=Depends(get_redis),
):
    """Manually flush cached template capacity (admin endpoint)."""
    deleted = invalidate_template_cache(redis, tenant_id)
    return {"tenant_id": tenant_id, "deleted_keys": deleted}
