"""
Monitoring routes: Prometheus metrics and log tail.
"""
from pathlib import Path
from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import StreamingResponse

from app.core.admin_dependencies import get_current_user
from app.utils.prometheus_metrics import get_metrics, CONTENT_TYPE_LATEST

router = APIRouter(
    prefix="/api/monitoring",
    tags=["Monitoring"],
    dependencies=[Depends(get_current_user)],
)

# Public router for metrics (no authentication)
router_public = APIRouter(
    prefix="/api/monitoring",
    tags=["Monitoring"]
)

BASE_DIR = Path(__file__).resolve().parent.parent.parent
LOG_FILE = BASE_DIR / "logs" / "app.log"


@router_public.get("/metrics")
async def metrics():
    """Prometheus scrape endpoint: /api/monitoring/metrics"""
    return StreamingResponse(
        iter([get_metrics()]),
        media_type=CONTENT_TYPE_LATEST
    )


@router.get("/logs")
def tail_logs(
    lines: int = Query(100, ge=1, le=1000, description="Number of lines to return"),
    level: Optional[str] = Query(None, description="INFO, WARNING, ERROR or DEBUG"),
    search: Optional[str] = Query(None, description="Text to look for, e.g. ZONE_INACTIVE"),
):
    """
    Last lines of the application log, optionally filtered.
    Ex: /api/monitoring/logs?level=WARNING&search=ZONE_INACTIVE
    """
    if not LOG_FILE.exists():
        return {"file": str(LOG_FILE), "total": 0, "lines": []}

    with open(LOG_FILE, "r", encoding="utf-8") as f:
        log_lines = [line.rstrip("\n") for line in f.readlines()]

    if level:
        tag = f"[{level.upper()}]"
        log_lines = [line for line in log_lines if tag in line.upper()]
    if search:
        log_lines = [line for line in log_lines if search.lower() in line.lower()]

    log_lines = log_lines[-lines:]
    return {"file": str(LOG_FILE), "total": len(log_lines), "lines": log_lines}
