# backend/checkup_capacity/redis_client.py
"""
Shared Redis connection.

Redis only backs the template-capacity cache; when REDIS_URL is not set
the client is None and the engine computes everything from the database.
"""

from redis import Redis

from .config import settings


def create_redis_client(url: str | None) -> Redis | None:
    if not url:
        return None
    return Redis.from_url(url, decode_responses=True, socket_timeout=2.0)


redis_client = create_redis_client(settings.redis_url)
