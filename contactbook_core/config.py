# contactbook_core/config.py
"""
Central runtime configuration for the contact book.
Environment-variable-driven defaults. The settings file (see settings_store)
fills in anything the environment leaves unset.
"""

import os


def _env_bool(key: str, default: bool) -> bool:
    return os.environ.get(key, str(int(default))).lower() in ("1", "true", "yes")


def env_is_set(key: str) -> bool:
    return key in os.environ and os.environ[key] != ""


# Backing JSON file holding the contact list.
CONTACTBOOK_DATA_FILE = os.environ.get("CONTACTBOOK_DATA_FILE", "data/contacts.json")

# Optional settings file (YAML or JSON). Missing file -> built-in defaults.
CONTACTBOOK_SETTINGS_PATH = os.environ.get("CONTACTBOOK_SETTINGS_PATH", "config/contactbook.yaml")

# Root logging level used by the CLI entry point.
CONTACTBOOK_LOG_LEVEL = os.environ.get("CONTACTBOOK_LOG_LEVEL", "WARNING").upper()

# Write to a temp file and swap it in, instead of truncating the backing file in place.
CONTACTBOOK_ATOMIC_WRITES = _env_bool("CONTACTBOOK_ATOMIC_WRITES", True)
