# backend/checkup_capacity/services/capacity/template_cache.py
"""
Redis cache for expanded template capacity.

Key format: capacity:templates:{tenant_id}
Value: JSON object {"0": cap, ..., "6": cap} (Sunday-based day-of-week).

Only the template expansion is cached. Overrides, defaults and bookings are
always read from the database, so an override write shows up on the next read.

Invalidation triggers:
✓ Slot template created/deleted
✓ Manual flush (admin endpoint)
"""

import json
import logging

from redis import Redis
from redis.exceptions import RedisError

from .config import CapacityConfig, get_capacity_config

logger = logging.getLogger(__name__)


class TemplateCapacityStore:
    """Redis wrapper holding per-day-of-week capacity for a tenant."""

    KEY_PREFIX = "capacity:templates"

    def __init__(self, redis: Redis, config: CapacityConfig | None = None):
        self.redis = redis
        self.config = config or get_capacity_config()

    def _key(self, tenant_id: int) -> str:
        return f"{self.KEY_PREFIX}:{tenant_id}"

    def get(self, tenant_id: int) -> dict[int, int] | None:
        """Cached capacity map, or None on cache miss."""
        raw = self.redis.get(self._key(tenant_id))
        if raw is None:
            return None
        if isinstance(raw, bytes):
            raw = raw.decode()
        data = json.loads(raw)
        if not isinstance(data, dict):
            raise ValueError(f"Malformed template cache entry for tenant {tenant_id}")
        try:
            return {int(dow): int(cap) for dow, cap in data.items()}
        except TypeError as e:
            raise ValueError(f"Malformed template cache entry for tenant {tenant_id}") from e

    def store(self, tenant_id: int, caps: dict[int, int]) -> None:
        payload = json.dumps({str(dow): cap for dow, cap in sorted(caps.items())})
        self.redis.set(self._key(tenant_id), payload, ex=self.config.template_cache_ttl_seconds)

    def delete(self, tenant_id: int) -> int:
        return self.redis.delete(self._key(tenant_id))


def invalidate_template_cache(redis: Redis | None, tenant_id: int) -> int:
    """
    Drop cached template capacity for a tenant.

    Returns:
        Number of deleted keys (0 when Redis is not configured or fails).
    """
    if redis is None:
        return 0
    try:
        return TemplateCapacityStore(redis).delete(tenant_id)
    except RedisError as e:
        logger.warning(f"Template cache invalidation failed for tenant {tenant_id}: {e}")
        return 0
