from __future__ import annotations
import threading
from typing import Optional

from ..core.models import Job, JobResult
from ..settings import load_settings
from .job_runner import JobRunner

_runner: Optional[JobRunner] = None
_lock = threading.Lock()


def get_runner() -> JobRunner:
    global _runner
    with _lock:
        if _runner is None:
            _runner = JobRunner.from_settings(load_settings())
        return _runner


def set_runner(runner: Optional[JobRunner]) -> None:
    """Thay runner mặc định (None -> dựng lại từ settings ở lần gọi sau)."""
    global _runner
    with _lock:
        _runner = runner


def run(job: Job) -> JobResult:
    return get_runner().run(job)
