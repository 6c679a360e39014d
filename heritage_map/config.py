from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent
DEFAULT_DATA_SOURCE = BASE_DIR / "data" / "unesco-sites.json"
DEFAULT_SITE_DIR = BASE_DIR / "site"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def load_env_file(base_dir: Path, filename: str = ".env") -> None:
    """Apply KEY=VALUE lines from base_dir/.env without overriding the environment.

    Lines may carry an ``export`` prefix and quoted values.
    """
    env_path = base_dir / filename
    if not env_path.is_file():
        return
    for raw_line in env_path.read_text(encoding="utf-8").splitlines():
        line = raw_line.strip()
        if line.startswith("export "):
            line = line[len("export "):].lstrip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, _, value = line.partition("=")
        key = key.strip()
        value = value.strip().strip('"\'')
        if key:
            os.environ.setdefault(key, value)


def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name, "").strip().casefold()
    if raw in _TRUE_VALUES:
        return True
    if raw in _FALSE_VALUES:
        return False
    return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be a number, got {raw!r}") from exc


@dataclass(slots=True)
class Settings:
    data_source: str = str(DEFAULT_DATA_SOURCE)
    site_dir: Path = DEFAULT_SITE_DIR
    show_country_panel: bool = True
    log_level: str = "INFO"
    fetch_timeout_seconds: float = 30.0

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            data_source=os.getenv("HERITAGE_MAP_DATA_SOURCE", "").strip() or str(DEFAULT_DATA_SOURCE),
            site_dir=Path(os.getenv("HERITAGE_MAP_SITE_DIR", "").strip() or DEFAULT_SITE_DIR),
            show_country_panel=_env_flag("HERITAGE_MAP_COUNTRY_PANEL", True),
            log_level=os.getenv("HERITAGE_MAP_LOG_LEVEL", "").strip().upper() or "INFO",
            fetch_timeout_seconds=_env_float("HERITAGE_MAP_FETCH_TIMEOUT", 30.0),
        )
