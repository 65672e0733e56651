import logging

from fastapi import FastAPI
from sqlalchemy import text

from .config import settings
from .database import SessionLocal
from .errors import register_error_handlers
from .middleware.audit import audit_middleware
from .redis_client import redis_client
from .routers import capacity, settings as capacity_settings, templates

logging.basicConfig(level=settings.log_level)

app = FastAPI(title="Checkup Capacity API")

app.middleware("http")(audit_middleware)
register_error_handlers(app)

app.include_router(capacity.router)
app.include_router(capacity_settings.router)
app.include_router(templates.router)


@app.get("/health")
def health():
    db_ok = True
    try:
        with SessionLocal() as db:
            db.execute(text("SELECT 1"))
    except Exception:
        logging.getLogger(__name__).exception("Database health check failed")
        db_ok = False

    redis_ok = None
    if redis_client is not None:
        try:
            redis_ok = bool(redis_client.ping())
        except Exception:
            redis_ok = False

    return {"database": db_ok, "redis": redis_ok}
