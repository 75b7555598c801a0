# contactbook_core/settings_store.py
"""
SettingsStore: read contact book settings (YAML/JSON) once and expose getters.
Environment variables that are explicitly set win over file values.
A missing or invalid settings file means built-in defaults.
"""

import os
import json
from typing import Dict, Any, Optional
import logging

import yaml

from contactbook_core import config

log = logging.getLogger(__name__)

_default = {
    "data_file": config.CONTACTBOOK_DATA_FILE,
    "log_level": config.CONTACTBOOK_LOG_LEVEL,
    "atomic_writes": config.CONTACTBOOK_ATOMIC_WRITES,
}

# settings key -> environment variable that overrides it
_ENV_KEYS = {
    "data_file": "CONTACTBOOK_DATA_FILE",
    "log_level": "CONTACTBOOK_LOG_LEVEL",
    "atomic_writes": "CONTACTBOOK_ATOMIC_WRITES",
}


def _as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ("1", "true", "yes", "on")


class SettingsStore:
    def __init__(self, path: Optional[str] = None):
        self.path = path or config.CONTACTBOOK_SETTINGS_PATH
        self._settings: Dict[str, Any] = self._read_file()

    def _read_file(self) -> Dict[str, Any]:
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                text = f.read()
            if self.path.lower().endswith(".json"):
                data = json.loads(text)
            else:
                data = yaml.safe_load(text) or {}
            if not isinstance(data, dict):
                raise ValueError(f"settings root must be a mapping, got {type(data).__name__}")
        except (OSError, ValueError, yaml.YAMLError) as e:
            log.warning("SettingsStore load error: %s", e)
            return {}
        log.info("SettingsStore: loaded settings from %s", self.path)
        return data

    def _lookup(self, key: str) -> Any:
        env_key = _ENV_KEYS[key]
        if config.env_is_set(env_key):
            return os.environ[env_key]
        return self._settings.get(key, _default[key])

    # Accessors
    def get_data_file(self) -> str:
        return str(self._lookup("data_file"))

    def get_log_level(self) -> str:
        return str(self._lookup("log_level")).upper()

    def get_atomic_writes(self) -> bool:
        return _as_bool(self._lookup("atomic_writes"))

    def as_dict(self) -> Dict[str, Any]:
        return {
            "data_file": self.get_data_file(),
            "log_level": self.get_log_level(),
            "atomic_writes": self.get_atomic_writes(),
        }
