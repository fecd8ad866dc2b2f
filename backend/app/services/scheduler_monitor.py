"""In-process health registry for the background jobs."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from datetime import datetime, timezone
from threading import Lock
from typing import Callable, Dict, Optional

JOB_MONTHLY_CHARGES = "monthly_charges"
MAX_RECENT_ERRORS = 10


@dataclass
class JobHealth:
    enabled: bool = True
    last_tick: Optional[datetime] = None
    last_result: Optional[str] = None
    recent_errors: deque = field(default_factory=lambda: deque(maxlen=MAX_RECENT_ERRORS))

    def as_dict(self) -> dict[str, object]:
        return {
            "enabled": self.enabled,
            "last_tick": self.last_tick,
            "last_result": self.last_result,
            "recent_errors": list(self.recent_errors),
        }


class SchedulerMonitor:
    """Records whether each job is enabled, when it last ran and how it failed."""

    _lock = Lock()
    _jobs: Dict[str, JobHealth] = {}

    @classmethod
    def _update(cls, job_name: str, change: Callable[[JobHealth], None]) -> None:
        with cls._lock:
            change(cls._jobs.setdefault(job_name, JobHealth()))

    @classmethod
    def set_job_enabled(cls, job_name: str, enabled: bool) -> None:
        cls._update(job_name, lambda health: setattr(health, "enabled", enabled))

    @classmethod
    def record_tick(cls, job_name: str, result: Optional[str] = None) -> None:
        now = datetime.now(timezone.utc)

        def change(health: JobHealth) -> None:
            health.last_tick = now
            if result is not None:
                health.last_result = result

        cls._update(job_name, change)

    @classmethod
    def record_error(cls, job_name: str, message: str) -> None:
        entry = f"{datetime.now(timezone.utc).isoformat()} - {message}"
        cls._update(job_name, lambda health: health.recent_errors.append(entry))

    @classmethod
    def snapshot(cls) -> dict[str, dict[str, object]]:
        with cls._lock:
            return {name: health.as_dict() for name, health in cls._jobs.items()}

    @classmethod
    def reset(cls) -> None:
        with cls._lock:
            cls._jobs.clear()
