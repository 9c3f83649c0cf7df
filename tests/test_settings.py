import sys
from pathlib import Path

from jobrunner.runner.capabilities import InterpreterRuntime, current_xoptions
from jobrunner.runner.job_runner import JobRunner
from jobrunner.settings import Settings, load_settings


def test_defaults(monkeypatch, tmp_path):
    monkeypatch.setenv("JOBRUNNER_CONF", str(tmp_path / "missing.yaml"))
    s = load_settings()
    assert s.interpreter == sys.executable
    assert s.temp_prefix == "jobrunner_"
    assert s.dialect.setting_flag == "-X"
    assert s.dialect.argument_separator == "-"
    assert s.temp_dir is None


def test_env_prefix(monkeypatch, tmp_path):
    monkeypatch.setenv("JOBRUNNER_CONF", str(tmp_path / "missing.yaml"))
    monkeypatch.setenv("JOBRUNNER_TEMP_PREFIX", "envpref_")
    assert load_settings().temp_prefix == "envpref_"


def test_yaml_overlay(monkeypatch, tmp_path):
    conf = tmp_path / "jobrunner.yaml"
    conf.write_text(
        "temp_prefix: yaml_\n"
        f"temp_dir: {tmp_path}\n"
        "dialect:\n"
        "  setting_flag: -d\n"
        "  file_flag: -f\n"
        "unknown_key: 1\n",
        encoding="utf-8",
    )
    monkeypatch.setenv("JOBRUNNER_CONF", str(conf))
    s = load_settings()
    assert s.temp_prefix == "yaml_"
    assert s.temp_dir == Path(tmp_path)
    assert s.dialect.setting_flag == "-d"
    assert s.dialect.file_flag == "-f"
    # field không có trong YAML giữ mặc định
    assert s.dialect.argument_separator == "-"


def test_non_mapping_yaml_is_ignored(monkeypatch, tmp_path):
    conf = tmp_path / "jobrunner.yaml"
    conf.write_text("- a\n- b\n", encoding="utf-8")
    monkeypatch.setenv("JOBRUNNER_CONF", str(conf))
    assert load_settings().temp_prefix == "jobrunner_"


def test_runner_from_settings(tmp_path):
    s = Settings(interpreter="/opt/python", temp_dir=tmp_path, temp_prefix="p_", coverage_options=["x"])
    r = JobRunner.from_settings(s)
    assert r.interpreter == "/opt/python"
    assert r.temp_dir == tmp_path
    assert r.temp_prefix == "p_"
    assert isinstance(r.runtime, InterpreterRuntime)
    assert r.runtime.coverage_options == ["x"]


def test_current_xoptions(monkeypatch):
    monkeypatch.setattr(sys, "_xoptions", {"dev": True, "frozen_modules": "off"}, raising=False)
    assert current_xoptions(["dev", "frozen_modules", "absent"]) == {"dev": None, "frozen_modules": "off"}


def test_interpreter_runtime_debugger_detection(monkeypatch):
    rt = InterpreterRuntime()
    monkeypatch.delitem(sys.modules, "debugpy", raising=False)
    monkeypatch.delitem(sys.modules, "pydevd", raising=False)
    assert not rt.has_debugger()
    monkeypatch.setitem(sys.modules, "pydevd", object())
    assert rt.has_debugger()
