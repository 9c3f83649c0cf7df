from __future__ import annotations
import sys
from typing import Dict, Iterable, Optional, Sequence

DEBUGGER_MODULES = ("debugpy", "pydevd")
_OPTIONS_WITH_VALUE = ("-X", "-W", "--check-hash-based-pycs")


class Runtime:
    """Truy vấn (read-only) tiện ích nào đang bật trong interpreter cha."""

    def has_coverage(self) -> bool:
        raise NotImplementedError

    def has_debugger(self) -> bool:
        raise NotImplementedError

    def is_debugger_frontend(self) -> bool:
        raise NotImplementedError

    def coverage_settings(self) -> Dict[str, Optional[str]]:
        raise NotImplementedError

    def debugger_settings(self) -> Dict[str, Optional[str]]:
        raise NotImplementedError


def current_xoptions(names: Iterable[str]) -> Dict[str, Optional[str]]:
    """
    Giá trị hiện tại của các -X option trong interpreter cha.
    `-X dev` xuất hiện trong sys._xoptions dưới dạng True -> trả về None (flag không có giá trị).
    """
    xoptions = getattr(sys, "_xoptions", {})
    out: Dict[str, Optional[str]] = {}
    for name in names:
        if name not in xoptions:
            continue
        value = xoptions[name]
        out[name] = None if value is True else str(value)
    return out


def _launched_as_module(argv: Sequence[str], module: str) -> bool:
    """Quét option của interpreter trong argv gốc, dừng ở -c, script hoặc -m."""
    args = iter(argv[1:])
    for arg in args:
        if arg in _OPTIONS_WITH_VALUE:
            next(args, None)
            continue
        if arg == "-m":
            return next(args, None) == module
        if arg.startswith("-m"):
            return arg[2:] == module
        if arg == "-" or arg.startswith("-c") or not arg.startswith("-"):
            return False
    return False


class InterpreterRuntime(Runtime):
    def __init__(self, coverage_options: Sequence[str] = (), debugger_options: Sequence[str] = ()):
        self.coverage_options = list(coverage_options)
        self.debugger_options = list(debugger_options)

    def has_coverage(self) -> bool:
        coverage = sys.modules.get("coverage")
        if coverage is None:
            return False
        current = getattr(getattr(coverage, "Coverage", None), "current", None)
        return current is not None and current() is not None

    def has_debugger(self) -> bool:
        return any(name in sys.modules for name in DEBUGGER_MODULES)

    def is_debugger_frontend(self) -> bool:
        # `python -m pdb script.py`: pdb ghi đè __main__ và sys.argv, chỉ orig_argv còn giữ "-m pdb"
        if _launched_as_module(sys.orig_argv, "pdb"):
            return True
        pdb = sys.modules.get("pdb")
        if pdb is None:
            return False
        tracer = getattr(sys.gettrace(), "__self__", None)
        return isinstance(tracer, pdb.Pdb)

    def coverage_settings(self) -> Dict[str, Optional[str]]:
        return current_xoptions(self.coverage_options)

    def debugger_settings(self) -> Dict[str, Optional[str]]:
        return current_xoptions(self.debugger_options)
