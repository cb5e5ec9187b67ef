"""Weighted per-subject decks: refill, shuffle and draw."""
import logging
import random

from study_deck.catalog import Catalog
from study_deck.models import StudyState, Topic

logger = logging.getLogger(__name__)


def shuffle(items: list, rng: random.Random | None = None) -> list:
    """Fisher-Yates shuffle in place. Returns the same list."""
    rng = rng or random
    for i in range(len(items) - 1, 0, -1):
        j = rng.randint(0, i)
        items[i], items[j] = items[j], items[i]
    return items


def build_deck(topics) -> list[Topic]:
    """One entry per unit of weight, in catalog order."""
    deck = []
    for topic in topics:
        deck.extend([topic] * topic.weight)
    return deck


def refill_deck(state: StudyState, catalog: Catalog, subject: str,
                rng: random.Random | None = None) -> list[Topic]:
    """Rebuild the whole deck for a subject from the catalog and shuffle it."""
    deck = shuffle(build_deck(catalog[subject]), rng)
    state.decks[subject] = deck
    logger.debug("Refilled %s deck with %d cards", subject, len(deck))
    return deck


def needs_refill(state: StudyState, subject: str) -> bool:
    return not state.decks.get(subject)


def ensure_decks_populated(state: StudyState, catalog: Catalog,
                           rng: random.Random | None = None) -> list[str]:
    """Refill every subject whose deck is absent or empty.

    Returns the subjects that were refilled.
    """
    refilled = []
    for subject in catalog:
        if needs_refill(state, subject):
            refill_deck(state, catalog, subject, rng)
            refilled.append(subject)
    return refilled


def draw_one(state: StudyState, subject: str) -> Topic:
    # Position is irrelevant after the shuffle, so treat the deck as a stack.
    return state.decks[subject].pop()


def cards_left(state: StudyState) -> int:
    return sum(len(deck) for deck in state.decks.values())
