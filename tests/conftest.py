import sys
from typing import Dict, Optional

import pytest
import structlog

from jobrunner.runner.capabilities import Runtime
from jobrunner.runner.job_runner import JobRunner


class FakeRuntime(Runtime):
    def __init__(self, coverage=False, debugger=False, frontend=False,
                 coverage_settings=None, debugger_settings=None):
        self.coverage = coverage
        self.debugger = debugger
        self.frontend = frontend
        self._coverage_settings: Dict[str, Optional[str]] = coverage_settings or {}
        self._debugger_settings: Dict[str, Optional[str]] = debugger_settings or {}

    def has_coverage(self):
        return self.coverage

    def has_debugger(self):
        return self.debugger

    def is_debugger_frontend(self):
        return self.frontend

    def coverage_settings(self):
        return dict(self._coverage_settings)

    def debugger_settings(self):
        return dict(self._debugger_settings)


@pytest.fixture
def fake_runtime():
    return FakeRuntime()


@pytest.fixture
def scratch_dir(tmp_path):
    d = tmp_path / "scratch"
    d.mkdir()
    return d


@pytest.fixture
def runner(fake_runtime, scratch_dir):
    return JobRunner(interpreter=sys.executable, runtime=fake_runtime, temp_dir=scratch_dir)


@pytest.fixture(autouse=True)
def _reset_structlog():
    yield
    structlog.reset_defaults()


@pytest.fixture
def make_runtime():
    return FakeRuntime
