from __future__ import annotations
from typing import List, Mapping, Optional

from ..core.models import Job
from ..settings import CommandDialect
from .capabilities import Runtime


def settings_to_parameters(settings: Mapping[str, Optional[str]], flag: str) -> List[str]:
    buffer: List[str] = []
    for key, value in settings.items():
        buffer.append(flag)
        buffer.append(key if value is None else f"{key}={value}")
    return buffer


def build_command(
    job: Job,
    interpreter: str,
    runtime: Runtime,
    dialect: CommandDialect,
    frontend: Optional[bool] = None,
) -> List[str]:
    """
    frontend=None -> hỏi runtime. Ở chế độ debugger front-end job phải có file,
    JobRunner.run đảm bảo điều này bằng file tạm.
    """
    cmd = [interpreter]
    cmd += settings_to_parameters(job.settings, dialect.setting_flag)

    # coverage ưu tiên hơn debugger, chỉ một trong hai được thêm
    if runtime.has_coverage():
        cmd += settings_to_parameters(runtime.coverage_settings(), dialect.setting_flag)
    elif runtime.has_debugger():
        cmd += settings_to_parameters(runtime.debugger_settings(), dialect.setting_flag)

    file = job.file

    if frontend is None:
        frontend = runtime.is_debugger_frontend()
    if frontend:
        cmd += dialect.debugger_flags

    if file is not None:
        if dialect.file_flag:
            cmd.append(dialect.file_flag)
        cmd.append(str(file))

    if job.has_arguments():
        if file is None:
            cmd.append(dialect.argument_separator)
        cmd += [arg.strip() for arg in job.arguments]

    return cmd
