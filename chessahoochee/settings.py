from __future__ import annotations

import json
import os
from pathlib import Path

from chessahoochee.db.database import get_app_data_dir, get_default_database_path

BASE_DIR = Path(__file__).resolve().parent
DEFAULT_PLAYERS_SEED_PATH = str(BASE_DIR / "resources" / "demo-players.json")
DEFAULT_TOURNAMENTS_SEED_PATH = str(BASE_DIR / "resources" / "demo-tourney.json")
DEFAULT_IO_ERROR_POLICY = "log"
DEFAULT_LOG_LEVEL = "INFO"


def _get_app_settings_path() -> Path:
    return get_app_data_dir() / "settings.json"


def _read_settings() -> dict[str, object]:
    path = _get_app_settings_path()
    if not path.exists():
        return {}
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError):
        return {}
    if isinstance(data, dict):
        return data
    return {}


def _write_settings(data: dict[str, object]) -> None:
    path = _get_app_settings_path()
    path.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")


def set_setting(key: str, value: object) -> None:
    settings = _read_settings()
    settings[key] = value
    _write_settings(settings)


def get_database_path() -> str:
    env_path = os.environ.get("CHESSAHOOCHEE_DB_PATH")
    if env_path:
        return env_path
    return str(_read_settings().get("database_path") or get_default_database_path())


def get_io_error_policy() -> str:
    env_policy = os.environ.get("CHESSAHOOCHEE_IO_ERROR_POLICY")
    if env_policy:
        return env_policy.strip().lower()
    return str(_read_settings().get("io_error_policy") or DEFAULT_IO_ERROR_POLICY).strip().lower()


def get_players_seed_path() -> str:
    return str(_read_settings().get("players_seed_path") or DEFAULT_PLAYERS_SEED_PATH)


def get_tournaments_seed_path() -> str:
    return str(_read_settings().get("tournaments_seed_path") or DEFAULT_TOURNAMENTS_SEED_PATH)


TRUE_STRINGS = {"1", "true", "yes", "on"}
FALSE_STRINGS = {"0", "false", "no", "off", ""}


def _as_bool(value: object, default: bool) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value != 0
    if isinstance(value, str):
        text = value.strip().lower()
        if text in TRUE_STRINGS:
            return True
        if text in FALSE_STRINGS:
            return False
    return default


def get_seed_on_startup() -> bool:
    return _as_bool(_read_settings().get("seed_on_startup", True), True)


def get_log_level() -> str:
    return os.environ.get("CHESSAHOOCHEE_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()
