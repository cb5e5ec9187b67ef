"""Completion tracking for the active batch."""
import logging
from typing import Callable

from study_deck.models import BatchCard, StudyState

logger = logging.getLogger(__name__)

DISCIPLINE_MESSAGE = "Discipline Check: You cannot finish until all topics are done."
CONFIRM_MESSAGE = "You have revised these topics and are ready for the next set?"

COMPLETED = "completed"
INCOMPLETE = "incomplete"
CANCELLED = "cancelled"
INACTIVE = "inactive"


def toggle_topic(state: StudyState, index: int) -> BatchCard | None:
    """Flip the done flag of one card. Out-of-range indexes are ignored."""
    if not 0 <= index < len(state.current_batch):
        return None
    card = state.current_batch[index]
    card.done = not card.done
    return card


def is_batch_complete(state: StudyState) -> bool:
    # Vacuously true for an empty batch; callers check `active` first.
    return all(card.done for card in state.current_batch)


def remaining_cards(state: StudyState) -> list[BatchCard]:
    return [card for card in state.current_batch if not card.done]


def complete_batch(state: StudyState,
                   confirm: Callable[[str], bool],
                   notify: Callable[[str], None]) -> str:
    """Close out the active batch once every card is done and the user agrees.

    Returns one of COMPLETED, INCOMPLETE, CANCELLED or INACTIVE. Only
    COMPLETED mutates the state.
    """
    if not state.active:
        return INACTIVE
    if not is_batch_complete(state):
        notify(DISCIPLINE_MESSAGE)
        return INCOMPLETE
    if not confirm(CONFIRM_MESSAGE):
        return CANCELLED

    state.active = False
    state.current_batch = []
    state.quiz_date = None
    state.range_str = ""
    logger.info("Batch completed")
    return COMPLETED
