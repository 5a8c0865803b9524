"""Fire-and-forget background work, used for outbound mail.

Jobs run on daemon threads by default; tests switch to inline execution
with ``set_async_execution(False)``. A bounded history of recent jobs is
kept in memory for inspection.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from threading import Lock, Thread
from typing import Any, Callable, Deque, Dict, Mapping, Optional
from uuid import uuid4

from ..logging_config import get_logger

__all__ = [
    "Job",
    "JobStatus",
    "clear_jobs",
    "enqueue",
    "list_jobs",
    "set_async_execution",
]

logger = get_logger(__name__)

HISTORY_SIZE = 100


class JobStatus(str, Enum):
    QUEUED = "queued"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass
class Job:
    name: str
    metadata: Dict[str, Any] = field(default_factory=dict)
    id: str = field(default_factory=lambda: uuid4().hex)
    status: JobStatus = JobStatus.QUEUED
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    finished_at: Optional[datetime] = None
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "status": self.status.value,
            "created_at": self.created_at.isoformat(),
            "finished_at": self.finished_at.isoformat() if self.finished_at else None,
            "error": self.error,
            "metadata": dict(self.metadata),
        }


_history: Deque[Job] = deque(maxlen=HISTORY_SIZE)
_history_lock = Lock()
_run_async = True


def set_async_execution(enabled: bool) -> None:
    global _run_async
    _run_async = enabled


def clear_jobs() -> None:
    with _history_lock:
        _history.clear()


def _run(job: Job, target: Callable[..., Any], kwargs: Mapping[str, Any]) -> None:
    job.status = JobStatus.RUNNING
    try:
        target(**kwargs)
    except Exception as exc:
        job.status = JobStatus.FAILED
        job.error = str(exc)
        logger.warning("Background job %s failed: %s", job.name, exc, extra={"job_id": job.id})
    else:
        job.status = JobStatus.SUCCEEDED
    finally:
        job.finished_at = datetime.now(timezone.utc)


def enqueue(
    name: str,
    target: Callable[..., Any],
    *,
    metadata: Optional[Dict[str, Any]] = None,
    **kwargs: Any,
) -> Job:
    """Run ``target(**kwargs)`` off the request path; a failure only marks the job."""

    job = Job(name=name, metadata=metadata or {})
    with _history_lock:
        _history.append(job)

    if _run_async:
        Thread(target=_run, args=(job, target, kwargs), name=f"budgettracker-{name}", daemon=True).start()
    else:
        _run(job, target, kwargs)
    return job


def list_jobs(limit: Optional[int] = None) -> list[Dict[str, Any]]:
    """Recent jobs, newest first."""

    with _history_lock:
        jobs = list(reversed(_history))
    if limit is not None:
        jobs = jobs[:limit]
    return [job.to_dict() for job in jobs]
