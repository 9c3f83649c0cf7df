from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class CommandDialect(BaseModel):
    """Các token dòng lệnh của interpreter con (mặc định: CPython)."""
    setting_flag: str = "-X"
    file_flag: Optional[str] = None
    argument_separator: str = "-"
    debugger_flags: List[str] = Field(default_factory=lambda: ["-m", "pdb", "-c", "continue"])


class Settings(BaseSettings):
    # ---- interpreter ----
    interpreter: str = sys.executable
    encoding: str = "utf-8"
    dialect: CommandDialect = Field(default_factory=CommandDialect)

    # ---- temp file ----
    temp_dir: Optional[Path] = None
    temp_prefix: str = "jobrunner_"

    # ---- -X option chuyển tiếp khi coverage / debugger đang bật ----
    coverage_options: List[str] = Field(default_factory=lambda: ["frozen_modules"])
    debugger_options: List[str] = Field(default_factory=lambda: ["frozen_modules"])

    # ---- logging ----
    log_level: str = "INFO"
    log_json: bool = True

    # env prefix JOBRUNNER_*
    model_config = SettingsConfigDict(env_prefix="JOBRUNNER_", extra="ignore")


def load_settings() -> Settings:
    # 0) Nạp base từ env JOBRUNNER_*
    s = Settings()

    # 1) Đọc conf/jobrunner.yaml (hoặc JOBRUNNER_CONF)
    conf_path = os.environ.get("JOBRUNNER_CONF", "conf/jobrunner.yaml")
    try:
        with open(conf_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except FileNotFoundError:
        data = {}
    if not isinstance(data, dict):
        data = {}

    # 2) Chỉ merge các key Settings biết, validate lại qua pydantic
    update: Dict[str, Any] = {k: v for k, v in data.items() if k in Settings.model_fields}
    if not update:
        return s
    return Settings.model_validate({**s.model_dump(), **update})
