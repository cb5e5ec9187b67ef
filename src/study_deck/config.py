"""Settings from an optional YAML file with environment overrides."""
import os
from dataclasses import dataclass
from pathlib import Path

import yaml

from study_deck.catalog import DEFAULT_CATALOG_PATH
from study_deck.db import DEFAULT_DB_PATH
from study_deck.storage import STORAGE_KEY

DEFAULT_CONFIG_PATH = str(Path.home() / ".study_deck" / "config.yaml")


@dataclass
class Settings:
    db_path: str = DEFAULT_DB_PATH
    catalog_path: str = DEFAULT_CATALOG_PATH
    storage_key: str = STORAGE_KEY
    log_level: str = "WARNING"


def load_settings(config_path: str | None = None) -> Settings:
    """Read settings. A missing config file is fine; defaults apply.

    Environment variables STUDY_DECK_DB, STUDY_DECK_CATALOG and
    STUDY_DECK_LOG_LEVEL override the file.
    """
    config_file = Path(config_path or DEFAULT_CONFIG_PATH)
    cfg = {}
    if config_file.exists():
        with open(config_file, "r", encoding="utf-8") as f:
            cfg = yaml.safe_load(f) or {}

    def get(name: str, env_name: str, default: str) -> str:
        v = os.getenv(env_name)
        if v is not None and v.strip() != "":
            return v.strip()
        return str(cfg.get(name, default))

    return Settings(
        db_path=os.path.expanduser(get("db_path", "STUDY_DECK_DB", DEFAULT_DB_PATH)),
        catalog_path=os.path.expanduser(
            get("catalog_path", "STUDY_DECK_CATALOG", DEFAULT_CATALOG_PATH)
        ),
        storage_key=str(cfg.get("storage_key", STORAGE_KEY)),
        log_level=get("log_level", "STUDY_DECK_LOG_LEVEL", "WARNING").upper(),
    )
