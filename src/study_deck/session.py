"""The study session: owns the state and saves after every mutation."""
import logging
import random
from datetime import datetime
from typing import Callable

from study_deck import deck, progress, scheduler
from study_deck.catalog import Catalog
from study_deck.dashboard import (
    compute_aggregate_stats, get_countdown_status, get_subject_progress,
)
from study_deck.db import DEFAULT_DB_PATH
from study_deck.models import BatchCard, Topic
from study_deck.storage import STORAGE_KEY, load_state, reset_state, save_state

logger = logging.getLogger(__name__)


def _decline(message: str) -> bool:
    return False


def _log_notice(message: str) -> None:
    logger.warning(message)


class StudySession:
    """Single owner of a StudyState for one catalog and one store.

    `confirm` answers yes/no questions and `notify` delivers messages to the
    user. Both are synchronous from the session's point of view.
    """

    def __init__(
        self,
        catalog: Catalog,
        db_path: str = DEFAULT_DB_PATH,
        storage_key: str = STORAGE_KEY,
        confirm: Callable[[str], bool] = _decline,
        notify: Callable[[str], None] = _log_notice,
        rng: random.Random | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.catalog = catalog
        self.db_path = db_path
        self.storage_key = storage_key
        self.confirm = confirm
        self.notify = notify
        self.rng = rng or random.Random()
        self.clock = clock
        self.state = load_state(db_path, storage_key)
        self.ensure_decks_populated()

    def save(self) -> None:
        save_state(self.db_path, self.state, self.storage_key)

    # Deck manager

    def refill_deck(self, subject: str) -> list[Topic]:
        result = deck.refill_deck(self.state, self.catalog, subject, self.rng)
        self.save()
        return result

    def ensure_decks_populated(self) -> list[str]:
        refilled = deck.ensure_decks_populated(self.state, self.catalog, self.rng)
        if refilled:
            logger.info("Refilled decks: %s", ", ".join(refilled))
            self.save()
        return refilled

    def draw_one(self, subject: str) -> Topic:
        if deck.needs_refill(self.state, subject):
            deck.refill_deck(self.state, self.catalog, subject, self.rng)
        topic = deck.draw_one(self.state, subject)
        self.save()
        return topic

    # Batch scheduler

    def draw_new_batch(self) -> datetime | None:
        if self.state.active:
            return None
        self.ensure_decks_populated()
        deadline = scheduler.draw_new_batch(
            self.state, self.catalog, self.rng, self.clock(),
        )
        self.save()
        return deadline

    # Progress tracker

    def toggle_topic(self, index: int) -> BatchCard | None:
        card = progress.toggle_topic(self.state, index)
        if card is not None:
            self.save()
        return card

    def is_batch_complete(self) -> bool:
        return progress.is_batch_complete(self.state)

    def complete_batch(self) -> str:
        outcome = progress.complete_batch(self.state, self.confirm, self.notify)
        if outcome == progress.COMPLETED:
            self.save()
        return outcome

    def aggregate_stats(self) -> dict:
        return compute_aggregate_stats(self.state, self.catalog)

    def subject_progress(self) -> list[dict]:
        return get_subject_progress(self.state, self.catalog)

    def countdown(self) -> dict | None:
        return get_countdown_status(self.state, self.clock())

    def reset_progress(self) -> bool:
        """Throw away all progress and start a fresh cycle, if confirmed."""
        if not self.confirm("Reset all progress and start a new cycle?"):
            return False
        self.state = reset_state(self.db_path, self.storage_key)
        self.ensure_decks_populated()
        logger.info("Progress reset")
        return True
