# logs: method / path / status / tenant; IP / UA; processing time
# does NOT block the request; does NOT write to the DB

import time
import json
import logging

from fastapi import Request

logger = logging.getLogger("checkup_capacity.audit")


async def audit_middleware(request: Request, call_next):
    start_ts = time.time()

    response = await call_next(request)

    duration_ms = int((time.time() - start_ts) * 1000)

    record = {
        "ts": int(start_ts),
        "method": request.method,
        "path": request.url.path,
        "status": response.status_code,
        "tenant": getattr(request.state, "tenant", None) or request.headers.get("X-Tenant", ""),
        "ip": request.headers.get("X-Real-IP") or (request.client.host if request.client else ""),
        "ua": request.headers.get("User-Agent", ""),
        "duration_ms": duration_ms,
    }

    logger.info(json.dumps(record, ensure_ascii=False))

    return response
