"""Cycle progress statistics and deadline countdown."""
from datetime import datetime

from study_deck.catalog import Catalog, full_cycle_weight
from study_deck.models import StudyState
from study_deck.scheduler import from_timestamp


def get_progress_label(percent: float) -> str:
    if percent >= 100:
        return "completed"
    elif percent > 0:
        return "in-progress"
    return "pending"


def get_progress_color(percent: float) -> str:
    if percent >= 100:
        return "green"
    elif percent >= 50:
        return "yellow"
    elif percent > 0:
        return "dark_orange"
    return "dim"


def _percent(done: int, total: int) -> int:
    if total == 0:
        return 0
    return round(done / total * 100)


def compute_aggregate_stats(state: StudyState, catalog: Catalog) -> dict:
    """Cards drawn out of decks across the whole catalog.

    `completed` counts every card drawn in the current cycle, including cards
    in an unfinished active batch. It measures cycle progress, not ticked
    checkboxes.
    """
    total = 0
    left = 0
    for subject in catalog:
        total += full_cycle_weight(catalog, subject)
        left += len(state.decks.get(subject, []))
    completed = total - left
    return {
        "total_cards_in_cycle": total,
        "current_cards_left": left,
        "completed": completed,
        "percent": _percent(completed, total),
    }


def get_subject_progress(state: StudyState, catalog: Catalog) -> list[dict]:
    results = []
    for subject, topics in catalog.items():
        remaining = state.decks.get(subject, [])
        topic_rows = []
        for topic in topics:
            left = sum(1 for card in remaining if card.name == topic.name)
            percent = _percent(topic.weight - left, topic.weight)
            topic_rows.append({
                "name": topic.name,
                "weight": topic.weight,
                "left_in_deck": left,
                "percent": percent,
                "status": get_progress_label(percent),
            })
        total = full_cycle_weight(catalog, subject)
        percent = _percent(total - len(remaining), total)
        results.append({
            "subject": subject,
            "total_weight": total,
            "cards_left": len(remaining),
            "percent": percent,
            "status": get_progress_label(percent),
            "topics": topic_rows,
        })
    return results


def get_countdown_status(state: StudyState, now: datetime | None = None) -> dict | None:
    """Display status for the active batch deadline. None when inactive."""
    if not state.active or state.quiz_date is None:
        return None
    now = now or datetime.now()
    hours = (from_timestamp(state.quiz_date) - now).total_seconds() / 3600
    if hours > 24:
        return {"phase": "scheduled", "text": state.range_str,
                "badge": "Scheduled Window", "hours": hours}
    elif hours > -12:
        return {"phase": "due", "text": "QUIZ ACTIVE",
                "badge": "Time to Test", "hours": hours}
    return {"phase": "overdue", "text": "OVERDUE",
            "badge": "Missed Deadline", "hours": hours}
