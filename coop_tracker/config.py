"""Load pull settings from env and the optional YAML file."""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

from coop_tracker.log import get_logger

log = get_logger(__name__)

load_dotenv()

CONFIG_DIR: Path = Path(__file__).resolve().parent.parent / "config"
SETTINGS_PATH: Path = CONFIG_DIR / "pull.yaml"
DATA_DIR: Path = Path(__file__).resolve().parent.parent / "data"

DEFAULT_SOURCE_URL = "https://github.com/SimplifyJobs/Summer2026-Internships"
DEFAULT_CATEGORY = "Software Engineering"
DEFAULT_DECORATIVE_SYMBOLS: tuple[str, ...] = (
    "\U0001F525",          # fire
    "\U0001F1FA\U0001F1F8",  # US flag
    "\U0001F512",          # lock
    "\U0001F393",          # graduation cap
    "\U0001F6C2",          # passport control
)


@dataclass
class PullSettings:
    source_url: str = DEFAULT_SOURCE_URL
    fetch_timeout: float = 30.0
    batch_size: int = 100
    db_path: Path = DATA_DIR / "jobs.db"
    user_agent: str = "coop-tracker"
    exclude_markers: list[str] = field(default_factory=list)
    decorative_symbols: list[str] = field(
        default_factory=lambda: list(DEFAULT_DECORATIVE_SYMBOLS)
    )
    default_category: str = DEFAULT_CATEGORY


def get_env(key: str, default: str = "") -> str:
    return os.environ.get(key, default).strip()


def ensure_dirs() -> None:
    DATA_DIR.mkdir(parents=True, exist_ok=True)


def _load_yaml(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        log.warning("Ignoring %s: expected a mapping, got %s", path.name, type(data).__name__)
        return {}
    return data


def _as_number(raw: Any, cast, default, key: str):
    if raw in (None, ""):
        return default
    try:
        value = cast(raw)
    except (TypeError, ValueError):
        log.warning("Invalid %s=%r, using default %s", key, raw, default)
        return default
    if value <= 0:
        log.warning("Non-positive %s=%r, using default %s", key, raw, default)
        return default
    return value


def load_settings(path: Path | None = None) -> PullSettings:
    """Build settings: env overrides YAML, YAML overrides defaults."""
    data = _load_yaml(path or SETTINGS_PATH)
    defaults = PullSettings()

    source_url = get_env("SIMPLIFYJOBS_PAGE_URL") or data.get("source_url") or defaults.source_url
    fetch_timeout = _as_number(
        get_env("PULL_TIMEOUT_SECONDS") or data.get("fetch_timeout"),
        float, defaults.fetch_timeout, "fetch_timeout",
    )
    batch_size = _as_number(
        get_env("PULL_BATCH_SIZE") or data.get("batch_size"),
        int, defaults.batch_size, "batch_size",
    )
    db_raw = get_env("COOP_TRACKER_DB") or data.get("db_path")
    db_path = Path(db_raw).expanduser() if db_raw else defaults.db_path

    return PullSettings(
        source_url=str(source_url).strip(),
        fetch_timeout=fetch_timeout,
        batch_size=batch_size,
        db_path=db_path,
        user_agent=str(data.get("user_agent") or defaults.user_agent),
        exclude_markers=[str(m) for m in data.get("exclude_markers") or []],
        decorative_symbols=[
            str(s) for s in data.get("decorative_symbols") or defaults.decorative_symbols
        ],
        default_category=str(data.get("default_category") or defaults.default_category),
    )
