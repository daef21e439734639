# 📦 main.py

from fastapi import FastAPI
from prometheus_client import start_http_server
import structlog
import uvicorn

from api.handlers import router as api_router
from config import settings

log = structlog.get_logger()

# ─────────────────────────────
# API Setup
app = FastAPI(title=settings.app_name, version=settings.version)
app.include_router(api_router)

# ─────────────────────────────
# Startup event
@app.on_event("startup")
async def startup_event():
    if settings.prometheus_port:
        start_http_server(settings.prometheus_port)
        log.info("Prometheus metrics server started", port=settings.prometheus_port)

# ─────────────────────────────
# Main entrypoint
if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=settings.host,
        port=settings.port,
    )
