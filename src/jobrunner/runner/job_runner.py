from __future__ import annotations
import os
import subprocess
import sys
import tempfile
from pathlib import Path
from typing import Callable, Dict, Mapping, Optional

import structlog

from ..core.environment import merge_environment
from ..core.errors import ProcessError
from ..core.models import Job, JobResult
from ..settings import CommandDialect, Settings
from .capabilities import InterpreterRuntime, Runtime
from .command import build_command

log = structlog.get_logger(__name__)


class JobRunner:
    """
    Chạy một Job trong interpreter con mới, trả về stdout/stderr đã capture.
    Exit code chỉ được log, việc suy ra kết quả là của tầng gọi.
    """

    def __init__(
        self,
        interpreter: Optional[str] = None,
        runtime: Optional[Runtime] = None,
        environ: Optional[Callable[[], Mapping[str, str]]] = None,
        dialect: Optional[CommandDialect] = None,
        temp_dir: Optional[Path] = None,
        temp_prefix: str = "jobrunner_",
        encoding: str = "utf-8",
    ):
        self.interpreter = interpreter or sys.executable
        self.runtime = runtime or InterpreterRuntime()
        self.environ = environ or (lambda: dict(os.environ))
        self.dialect = dialect or CommandDialect()
        self.temp_dir = temp_dir
        self.temp_prefix = temp_prefix
        self.encoding = encoding

    @classmethod
    def from_settings(cls, s: Settings) -> "JobRunner":
        return cls(
            interpreter=s.interpreter,
            runtime=InterpreterRuntime(s.coverage_options, s.debugger_options),
            dialect=s.dialect,
            temp_dir=s.temp_dir,
            temp_prefix=s.temp_prefix,
            encoding=s.encoding,
        )

    def run(self, job: Job) -> JobResult:
        temporary_file: Optional[Path] = None
        frontend = self.runtime.is_debugger_frontend()

        # pdb cần một script thật, nên ở chế độ debugger code cũng được ghi ra file tạm
        if job.has_input() or (frontend and job.file is None):
            temporary_file = self._write_temporary_file(job.code)
            job = job.externalized(temporary_file)

        try:
            return self._run_process(job, frontend)
        finally:
            if temporary_file is not None:
                temporary_file.unlink(missing_ok=True)
                log.debug("job.tempfile.removed", path=str(temporary_file))

    # ---------- temp file ----------

    def _write_temporary_file(self, code: str) -> Path:
        try:
            fd, name = tempfile.mkstemp(
                prefix=self.temp_prefix,
                suffix=".py",
                dir=str(self.temp_dir) if self.temp_dir else None,
            )
        except OSError as e:
            raise ProcessError("unable to write temporary file") from e

        if not name:
            os.close(fd)
        assert name != "", "mkstemp returned an empty path"
        path = Path(name)

        try:
            with open(fd, "w", encoding=self.encoding, newline="") as f:
                f.write(code)
        except (OSError, UnicodeError) as e:
            path.unlink(missing_ok=True)
            raise ProcessError("unable to write temporary file") from e

        log.debug("job.tempfile.created", path=str(path))
        return path

    # ---------- process ----------

    def _environment(self, job: Job) -> Optional[Dict[str, str]]:
        if not job.has_environment_variables():
            # None -> child kế thừa env của cha nguyên vẹn
            return None
        return merge_environment(self.environ(), job.environment_variables)

    def _run_process(self, job: Job, frontend: bool) -> JobResult:
        env = self._environment(job)
        cmd = build_command(job, self.interpreter, self.runtime, self.dialect, frontend=frontend)

        try:
            payload = job.stdin_payload().encode(self.encoding)
        except UnicodeError as e:
            raise ProcessError("unable to encode job input") from e

        log.debug("job.spawn", cmd=cmd, redirect_errors=job.redirect_errors)
        try:
            proc = subprocess.Popen(
                cmd,
                stdin=subprocess.PIPE,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT if job.redirect_errors else subprocess.PIPE,
                env=env,
            )
        except (OSError, ValueError) as e:
            raise ProcessError("unable to spawn worker process") from e

        # communicate() ghi stdin rồi đóng, đọc stdout/stderr song song -> không deadlock khi cả 2 pipe đầy
        with proc:
            try:
                out, err = proc.communicate(input=payload)
            except OSError as e:
                proc.kill()
                raise ProcessError("unable to communicate with worker process") from e

        log.debug("job.exit", pid=proc.pid, rc=proc.returncode)
        return JobResult(
            stdout=self._decode(out),
            stderr=self._decode(err),
        )

    def _decode(self, data: Optional[bytes]) -> str:
        if not data:
            return ""
        # surrogateescape: caller encode lại được đúng từng byte child đã ghi
        return data.decode(self.encoding, errors="surrogateescape")
