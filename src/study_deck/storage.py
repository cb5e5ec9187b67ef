"""Persistence of the study state as a single versioned JSON blob."""
import json
import logging
import sqlite3
from datetime import datetime

from study_deck.db import init_db, read_value, write_value, list_keys
from study_deck.errors import StateCorruptedError, StorageReadError, StorageWriteError
from study_deck.models import StudyState, default_state

logger = logging.getLogger(__name__)

# Bump the suffix on breaking changes to the blob shape. Blobs stored under an
# older key are simply never read again.
KEY_PREFIX = "study-deck-v"
SCHEMA_VERSION = 3
STORAGE_KEY = f"{KEY_PREFIX}{SCHEMA_VERSION}"


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _check_topic(entry, where: str) -> None:
    if not isinstance(entry, dict):
        raise StateCorruptedError(f"{where}: expected an object, got {type(entry).__name__}")
    if not isinstance(entry.get("name"), str):
        raise StateCorruptedError(f"{where}: missing or invalid 'name'")
    if not _is_int(entry.get("weight")) or entry["weight"] < 1:
        raise StateCorruptedError(f"{where}: missing or invalid 'weight'")


def validate_state(data) -> None:
    """Structural type check of a decoded blob.

    Raises StateCorruptedError if `decks` or `currentBatch` are absent, or if
    any field that is present has the wrong shape. `active`, `quizDate` and
    `rangeStr` may be missing and fall back to their defaults.
    """
    if not isinstance(data, dict):
        raise StateCorruptedError("state blob is not an object")
    if "decks" not in data or "currentBatch" not in data:
        raise StateCorruptedError("state blob is missing 'decks' or 'currentBatch'")

    decks = data["decks"]
    if not isinstance(decks, dict):
        raise StateCorruptedError("'decks' is not an object")
    for subject, deck in decks.items():
        if not isinstance(deck, list):
            raise StateCorruptedError(f"deck for {subject!r} is not a list")
        for i, entry in enumerate(deck):
            _check_topic(entry, f"decks[{subject!r}][{i}]")

    batch = data["currentBatch"]
    if not isinstance(batch, list):
        raise StateCorruptedError("'currentBatch' is not a list")
    for i, card in enumerate(batch):
        _check_topic(card, f"currentBatch[{i}]")
        if not isinstance(card.get("subject"), str):
            raise StateCorruptedError(f"currentBatch[{i}]: missing or invalid 'subject'")
        if not isinstance(card.get("done", False), bool):
            raise StateCorruptedError(f"currentBatch[{i}]: invalid 'done'")

    if not isinstance(data.get("active", False), bool):
        raise StateCorruptedError("'active' is not a boolean")
    quiz_date = data.get("quizDate")
    if quiz_date is not None and not _is_int(quiz_date):
        raise StateCorruptedError("'quizDate' is not a timestamp")
    if not isinstance(data.get("rangeStr", ""), str):
        raise StateCorruptedError("'rangeStr' is not a string")


def save_state(db_path: str, state: StudyState, key: str = STORAGE_KEY) -> None:
    payload = json.dumps(state.to_dict(), ensure_ascii=False)
    try:
        init_db(db_path)
        write_value(db_path, key, payload, datetime.now().isoformat())
    except (sqlite3.Error, OSError) as e:
        raise StorageWriteError(f"Could not save progress to {db_path}: {e}") from e


def reset_state(db_path: str, key: str = STORAGE_KEY) -> StudyState:
    """Overwrite the stored blob with the default state and return it."""
    state = default_state()
    save_state(db_path, state, key)
    return state


def load_state(db_path: str, key: str = STORAGE_KEY) -> StudyState:
    """Load the state blob, falling back to (and persisting) the default state.

    A missing blob is the normal first-run case. A blob that can't be decoded
    or fails validation is treated as corrupted and replaced.
    """
    try:
        init_db(db_path)
        raw = read_value(db_path, key)
        keys = list_keys(db_path) if raw is None else []
    except (sqlite3.Error, OSError) as e:
        raise StorageReadError(f"Could not open saved progress at {db_path}: {e}") from e
    if raw is None:
        stale = [k for k in keys if k.startswith(KEY_PREFIX) and k != key]
        if stale:
            logger.warning("Ignoring state stored under older keys: %s", ", ".join(stale))
        else:
            logger.info("No saved state under %s, starting fresh", key)
        return reset_state(db_path, key)

    try:
        data = json.loads(raw)
        validate_state(data)
    except (ValueError, StateCorruptedError) as e:
        logger.warning("State corrupted or outdated, resetting: %s", e)
        return reset_state(db_path, key)
    return StudyState.from_dict(data)
