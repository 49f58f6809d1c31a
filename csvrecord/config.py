from __future__ import annotations

from dataclasses import dataclass, fields
from pathlib import Path
import os
import yaml

from csvrecord.infra.logging.setup import mapLogLevel
from csvrecord.infra.sources.csv_utils import CsvDialect

ENV_PREFIX = "CSVRECORD_"


@dataclass(frozen=True)
class Settings:
    # CSV dialect
    delimiter: str = ","
    quotechar: str = '"'
    comment_marker: str | None = None
    null_string: str | None = None
    has_header: bool = True
    trim: bool = False
    encoding: str = "utf-8-sig"

    # Paths
    log_dir: str = "./logs"
    report_dir: str = "./reports"

    # Misc
    log_level: str = "INFO"
    report_items_limit: int = 200

    def to_dialect(self) -> CsvDialect:
        return CsvDialect(
            delimiter=self.delimiter,
            quotechar=self.quotechar,
            comment_marker=self.comment_marker,
            null_string=self.null_string,
            has_header=self.has_header,
            trim=self.trim,
            encoding=self.encoding,
        )


@dataclass(frozen=True)
class LoadedSettings:
    settings: Settings
    sources_used: list[str]


BOOL_KEYS = ("has_header", "trim")
INT_KEYS = ("report_items_limit",)


def _read_yaml_config(path: Path) -> dict:
    if not path.exists():
        return {}
    if not path.is_file():
        return {}
    with path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            return {}
        return data


def _env_get(name: str) -> str | None:
    v = os.getenv(name)
    if v is None or v.strip() == "":
        return None
    return v.strip()


def parse_bool(v: str | None) -> bool | None:
    if v is None:
        return None
    vv = v.lower()
    if vv in ("1", "true", "yes", "y"):
        return True
    if vv in ("0", "false", "no", "n"):
        return False
    raise ValueError(f"Invalid boolean env value: {v}")


def parse_int(v: str | None) -> int | None:
    if v is None:
        return None
    return int(v)


def _validate_settings(settings: Settings) -> None:
    """
    Назначение:
        Отсекает настройки, с которыми CSV-источник или лог команды упадут при первом чтении.

    Поведение:
        - log_level из ERROR|WARN|INFO|DEBUG.
        - delimiter/quotechar: ровно один символ, не совпадают между собой.
        - report_items_limit >= 0.
    """
    mapLogLevel(settings.log_level)
    for key in ("delimiter", "quotechar"):
        value = getattr(settings, key)
        if len(value) != 1:
            raise ValueError(f"{key} must be a single character, got {value!r}")
    if settings.delimiter == settings.quotechar:
        raise ValueError(f"delimiter and quotechar must differ, both are {settings.delimiter!r}")
    if settings.report_items_limit < 0:
        raise ValueError(f"report_items_limit must be >= 0, got {settings.report_items_limit}")


def load_settings(
    config_path: str | None,
    cli_overrides: dict,
) -> LoadedSettings:
    """
    Priority: CLI > ENV > config > defaults
    """
    sources: list[str] = []
    defaults = Settings()
    keys = [f.name for f in fields(Settings)]

    # 1) config file
    cfg: dict = {}
    if config_path:
        cfg = _read_yaml_config(Path(config_path))
        if cfg:
            sources.append("config")

    # 2) env
    env = {key: _env_get(f"{ENV_PREFIX}{key.upper()}") for key in keys}
    if any(v is not None for v in env.values()):
        sources.append("env")

    # merge config -> env -> cli
    merged = {key: cfg.get(key, getattr(defaults, key)) for key in keys}

    for key, value in env.items():
        if value is None:
            continue
        if key in BOOL_KEYS:
            merged[key] = parse_bool(value)
        elif key in INT_KEYS:
            merged[key] = parse_int(value)
        else:
            merged[key] = value

    # 3) apply CLI overrides (only those explicitly passed)
    if any(v is not None for v in cli_overrides.values()):
        sources.append("cli")

    for k, v in cli_overrides.items():
        if v is None:
            continue
        merged[k] = v

    settings = Settings(
        delimiter=str(merged["delimiter"]),
        quotechar=str(merged["quotechar"]),
        comment_marker=merged["comment_marker"],
        null_string=merged["null_string"],
        has_header=bool(merged["has_header"]),
        trim=bool(merged["trim"]),
        encoding=merged["encoding"],
        log_dir=merged["log_dir"],
        report_dir=merged["report_dir"],
        log_level=merged["log_level"],
        report_items_limit=int(merged["report_items_limit"]),
    )
    _validate_settings(settings)

    return LoadedSettings(settings=settings, sources_used=sources)
