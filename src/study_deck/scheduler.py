"""Batch drawing and deadline calculation."""
import logging
import random
from datetime import datetime, timedelta

from study_deck.catalog import Catalog
from study_deck.deck import draw_one, needs_refill, refill_deck
from study_deck.models import BatchCard, StudyState

logger = logging.getLogger(__name__)

DEADLINE_HOUR = 9


def days_for_weight(total_weight: int) -> int:
    """Days until the review deadline for a batch of the given total weight.

    Sum 1-10 = 2 days, 11-14 = 3 days, 15+ = 4 days.
    """
    if total_weight >= 15:
        return 4
    if total_weight >= 11:
        return 3
    return 2


def compute_deadline(total_weight: int, now: datetime | None = None) -> datetime:
    now = now or datetime.now()
    target = now + timedelta(days=days_for_weight(total_weight))
    return target.replace(hour=DEADLINE_HOUR, minute=0, second=0, microsecond=0)


def format_deadline(deadline: datetime) -> str:
    """e.g. 'Deadline: Mon, Feb 16'."""
    return f"Deadline: {deadline:%a}, {deadline:%b} {deadline.day}"


def to_timestamp(dt: datetime) -> int:
    """Epoch milliseconds for a naive local datetime."""
    return int(dt.timestamp() * 1000)


def from_timestamp(ts: int) -> datetime:
    return datetime.fromtimestamp(ts / 1000)


def draw_new_batch(state: StudyState, catalog: Catalog,
                   rng: random.Random | None = None,
                   now: datetime | None = None) -> datetime | None:
    """Draw one card per subject and schedule the deadline.

    Only one batch may be in flight: if a batch is already active this
    returns None and leaves the state untouched. Otherwise returns the
    deadline.
    """
    if state.active:
        return None

    batch = []
    total_weight = 0
    for subject in catalog:
        if needs_refill(state, subject):
            refill_deck(state, catalog, subject, rng)
        topic = draw_one(state, subject)
        batch.append(BatchCard(subject=subject, name=topic.name, weight=topic.weight))
        total_weight += topic.weight

    deadline = compute_deadline(total_weight, now)
    state.active = True
    state.current_batch = batch
    state.quiz_date = to_timestamp(deadline)
    state.range_str = format_deadline(deadline)
    logger.info("Drew batch of %d cards, total weight %d, due %s",
                len(batch), total_weight, deadline.isoformat())
    return deadline
