from __future__ import annotations
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Mapping, Optional, Sequence, Union


@dataclass(frozen=True)
class FromCode:
    # input != None -> runner sẽ ghi code ra file tạm và pipe input vào stdin
    input: Optional[str] = None


@dataclass(frozen=True)
class FromFile:
    path: Path
    piped_input: str = ""


StdinSource = Union[FromCode, FromFile]


@dataclass(frozen=True)
class Job:
    """
    Mô tả một lần chạy interpreter con.
    Nguồn stdin là FromCode (code đi qua stdin) hoặc FromFile (code nằm trong file,
    stdin nhận piped_input), nên file mode và input không thể cùng tồn tại.
    """
    code: str
    settings: Mapping[str, Optional[str]] = field(default_factory=dict)
    environment_variables: Mapping[str, Any] = field(default_factory=dict)
    arguments: Sequence[str] = ()
    stdin: StdinSource = FromCode()
    redirect_errors: bool = False

    @property
    def input(self) -> Optional[str]:
        return self.stdin.input if isinstance(self.stdin, FromCode) else None

    @property
    def file(self) -> Optional[Path]:
        return self.stdin.path if isinstance(self.stdin, FromFile) else None

    def has_input(self) -> bool:
        return self.input is not None

    def has_environment_variables(self) -> bool:
        return len(self.environment_variables) > 0

    def has_arguments(self) -> bool:
        return len(self.arguments) > 0

    def stdin_payload(self) -> str:
        if isinstance(self.stdin, FromFile):
            return self.stdin.piped_input
        return self.code

    def externalized(self, path: Path) -> "Job":
        return replace(self, stdin=FromFile(path=path, piped_input=self.input or ""))


@dataclass(frozen=True)
class JobResult:
    stdout: str
    stderr: str
