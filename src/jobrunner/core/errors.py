from __future__ import annotations


class ProcessError(RuntimeError):
    """Không chuẩn bị hoặc không spawn được tiến trình con."""
