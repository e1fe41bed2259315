"""Load environment and search tunables."""
from __future__ import annotations

import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

from cvmatch.log import get_logger

log = get_logger(__name__)

load_dotenv()

CONFIG_DIR: Path = Path(__file__).resolve().parent.parent / "config"
SETTINGS_PATH: Path = CONFIG_DIR / "search.yaml"

DEFAULT_LLM_MODEL = "llama-3.3-70b-versatile"


@dataclass(frozen=True)
class SearchSettings:
    country: str = "US"
    primary_limit: int = 30
    fallback_limit: int = 15
    max_results: int = 25
    cv_char_limit: int = 5000
    description_chars: int = 300
    min_cv_chars: int = 50
    request_timeout: float = 15.0
    retry_attempts: int = 3
    retry_base_delay: float = 1.0


def get_env(key: str, default: str = "") -> str:
    return os.environ.get(key, default).strip()


def load_settings(path: Path | None = None) -> SearchSettings:
    """Merge ``config/search.yaml`` (or ``CVMATCH_SETTINGS``) over the defaults.

    A missing file is not an error; the defaults are production values.
    """
    if path is None:
        override = get_env("CVMATCH_SETTINGS")
        path = Path(override) if override else SETTINGS_PATH
    if not path.exists():
        log.debug("No settings file at %s — using defaults", path)
        return SearchSettings()

    with open(path, "r", encoding="utf-8") as f:
        data: dict[str, Any] = yaml.safe_load(f) or {}

    known = {f.name for f in fields(SearchSettings)}
    unknown = sorted(set(data) - known)
    if unknown:
        log.warning("Ignoring unknown settings in %s: %s", path.name, ", ".join(unknown))
    return SearchSettings(**{k: v for k, v in data.items() if k in known})
