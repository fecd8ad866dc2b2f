"""Router exposing background job health."""

from __future__ import annotations

from fastapi import APIRouter

from ..services.scheduler_monitor import SchedulerMonitor

router = APIRouter()


@router.get("/scheduler")
def get_scheduler_health() -> dict[str, object]:
    """Return enabled flag, last tick, last result and recent errors per job."""

    return {"jobs": SchedulerMonitor.snapshot()}
