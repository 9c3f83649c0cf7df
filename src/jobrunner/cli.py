from __future__ import annotations
import argparse
import sys
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import structlog

from .core.errors import ProcessError
from .core.models import FromCode, Job
from .logging import setup_logging
from .runner.job_runner import JobRunner
from .settings import load_settings


def _pairs(items: List[str], what: str) -> Dict[str, Optional[str]]:
    out: Dict[str, Optional[str]] = {}
    for item in items:
        key, sep, value = item.partition("=")
        if not key:
            raise argparse.ArgumentTypeError(f"invalid {what}: {item!r}")
        out[key] = value if sep else None
    return out


def _split_argv(argv: List[str]) -> Tuple[List[str], List[str]]:
    # mọi thứ sau "--" là argv của chương trình con
    if "--" in argv:
        i = argv.index("--")
        return argv[:i], argv[i + 1:]
    return argv, []


def _write(stream, text: str, encoding: str) -> None:
    # ghi lại đúng byte child đã xuất (kể cả byte không hợp lệ theo encoding)
    buffer = getattr(stream, "buffer", None)
    if buffer is None:
        stream.write(text)
        return
    stream.flush()
    buffer.write(text.encode(encoding, "surrogateescape"))
    buffer.flush()


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="jobrunner",
        description="Run Python code in a fresh child interpreter and print its output.",
    )
    ap.add_argument("script", nargs="?", default="-", help="file chứa code ('-' = đọc từ stdin)")
    ap.add_argument("-X", dest="settings", action="append", default=[], metavar="KEY=VALUE")
    ap.add_argument("-e", "--env", dest="env", action="append", default=[], metavar="NAME=VALUE")
    ap.add_argument("--input", type=Path, default=None, help="file được pipe vào stdin của child")
    ap.add_argument("--redirect-errors", action="store_true")
    ap.add_argument("--interpreter", default=None)
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    own, child_args = _split_argv(list(sys.argv[1:] if argv is None else argv))
    ap = build_parser()
    args = ap.parse_args(own)

    s = load_settings()
    setup_logging(s.log_level, s.log_json)
    log = structlog.get_logger("jobrunner.cli")

    try:
        settings = _pairs(args.settings, "setting")
        env = {k: (v or "") for k, v in _pairs(args.env, "environment variable").items()}
    except argparse.ArgumentTypeError as e:
        ap.error(str(e))

    try:
        code = sys.stdin.read() if args.script == "-" else Path(args.script).read_text(encoding=s.encoding)
        piped = args.input.read_text(encoding=s.encoding) if args.input else None
    except OSError as e:
        ap.error(f"cannot read input: {e}")

    job = Job(
        code=code,
        settings=settings,
        environment_variables=env,
        arguments=child_args,
        stdin=FromCode(input=piped),
        redirect_errors=args.redirect_errors,
    )

    runner = JobRunner.from_settings(s)
    if args.interpreter:
        runner.interpreter = args.interpreter

    try:
        result = runner.run(job)
    except ProcessError as e:
        log.error("job.failed", error=str(e), cause=repr(e.__cause__))
        print(f"jobrunner: {e}", file=sys.stderr)
        return 1

    _write(sys.stdout, result.stdout, s.encoding)
    _write(sys.stderr, result.stderr, s.encoding)
    return 0


if __name__ == "__main__":
    sys.exit(main())
