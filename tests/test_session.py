import json
import random
from collections import Counter
from datetime import datetime
from unittest.mock import Mock

import pytest

from study_deck.db import read_value
from study_deck.errors import StorageReadError
from study_deck.models import default_state
from study_deck.progress import CANCELLED, COMPLETED, INCOMPLETE
from study_deck.session import StudySession
from study_deck.storage import STORAGE_KEY, load_state


def make_session(tmp_db, catalog, confirm=None, notify=None, seed=3):
    return StudySession(
        catalog,
        db_path=tmp_db,
        confirm=confirm or Mock(return_value=True),
        notify=notify or Mock(),
        rng=random.Random(seed),
        clock=lambda: datetime(2026, 2, 14, 15, 30),
    )


def stored(tmp_db):
    return read_value(tmp_db, STORAGE_KEY)


def test_startup_populates_and_saves(tmp_db, catalog):
    session = make_session(tmp_db, catalog)
    assert set(session.state.decks) == {"History", "Polity", "Economy"}
    assert load_state(tmp_db) == session.state


def test_startup_restores_previous_state(tmp_db, catalog):
    first = make_session(tmp_db, catalog)
    first.draw_new_batch()
    second = make_session(tmp_db, catalog, seed=99)
    assert second.state == first.state


def test_startup_heals_missing_subject(tmp_db, catalog, small_catalog):
    make_session(tmp_db, small_catalog)
    session = make_session(tmp_db, catalog)
    assert Counter(t.name for t in session.state.decks["Economy"]) == {"Inflation": 2}


def test_refill_deck_saves(tmp_db, catalog):
    session = make_session(tmp_db, catalog)
    session.draw_one("History")
    assert len(load_state(tmp_db).decks["History"]) == 3
    session.refill_deck("History")
    assert len(load_state(tmp_db).decks["History"]) == 4


def test_draw_one_refills_empty_deck(tmp_db, catalog):
    session = make_session(tmp_db, catalog)
    session.draw_one("Economy")
    session.draw_one("Economy")
    assert session.state.decks["Economy"] == []
    topic = session.draw_one("Economy")
    assert topic.name == "Inflation"
    assert len(session.state.decks["Economy"]) == 1


def test_draw_new_batch_persists(tmp_db, catalog):
    session = make_session(tmp_db, catalog)
    deadline = session.draw_new_batch()
    assert deadline is not None
    assert deadline.hour == 9
    assert load_state(tmp_db) == session.state
    assert len(session.state.current_batch) == len(catalog)


def test_draw_new_batch_while_active_changes_nothing(tmp_db, catalog):
    session = make_session(tmp_db, catalog)
    session.draw_new_batch()
    session.toggle_topic(0)
    snapshot = session.state.to_dict()
    blob = stored(tmp_db)

    assert session.draw_new_batch() is None
    assert session.state.to_dict() == snapshot
    assert stored(tmp_db) == blob


def test_toggle_topic_persists(tmp_db, catalog):
    session = make_session(tmp_db, catalog)
    session.draw_new_batch()
    card = session.toggle_topic(2)
    assert card.done is True
    assert load_state(tmp_db).current_batch[2].done is True


def test_toggle_topic_out_of_range(tmp_db, catalog):
    session = make_session(tmp_db, catalog)
    session.draw_new_batch()
    blob = stored(tmp_db)
    assert session.toggle_topic(10) is None
    assert stored(tmp_db) == blob


def test_complete_batch_gated_on_unfinished(tmp_db, catalog):
    notify = Mock()
    session = make_session(tmp_db, catalog, notify=notify)
    session.draw_new_batch()
    session.toggle_topic(0)
    snapshot = session.state.to_dict()

    assert session.complete_batch() == INCOMPLETE
    notify.assert_called_once()
    assert session.state.to_dict() == snapshot
    assert load_state(tmp_db).active is True


def test_complete_batch_cancelled(tmp_db, catalog):
    session = make_session(tmp_db, catalog, confirm=Mock(return_value=False))
    session.draw_new_batch()
    for i in range(len(catalog)):
        session.toggle_topic(i)
    assert session.complete_batch() == CANCELLED
    assert session.state.active is True


def test_complete_batch_then_draw_next(tmp_db, catalog):
    session = make_session(tmp_db, catalog)
    session.draw_new_batch()
    for i in range(len(catalog)):
        session.toggle_topic(i)
    assert session.is_batch_complete()
    assert session.complete_batch() == COMPLETED
    assert load_state(tmp_db).active is False

    session.draw_new_batch()
    assert session.state.active is True
    assert session.aggregate_stats()["completed"] == 6


def test_cycle_wraps_after_all_cards_drawn(tmp_db, catalog):
    session = make_session(tmp_db, catalog)
    drawn = Counter()
    # History has 4 cards in a cycle: four batches exhaust it.
    for _ in range(4):
        session.draw_new_batch()
        drawn[session.state.current_batch[0].name] += 1
        for i in range(len(catalog)):
            session.toggle_topic(i)
        session.complete_batch()
    assert drawn == {"Mughals": 3, "Vedic Age": 1}


def test_countdown(tmp_db, catalog):
    session = make_session(tmp_db, catalog)
    assert session.countdown() is None
    session.draw_new_batch()
    assert session.countdown()["phase"] == "scheduled"


def test_subject_progress(tmp_db, catalog):
    session = make_session(tmp_db, catalog)
    session.draw_new_batch()
    rows = session.subject_progress()
    assert [r["subject"] for r in rows] == ["History", "Polity", "Economy"]
    assert all(r["percent"] > 0 for r in rows)


def test_reset_progress(tmp_db, catalog):
    session = make_session(tmp_db, catalog)
    session.draw_new_batch()
    assert session.reset_progress() is True
    assert session.state.active is False
    assert session.aggregate_stats()["completed"] == 0
    assert load_state(tmp_db) == session.state


def test_reset_progress_declined(tmp_db, catalog):
    confirm = Mock(return_value=False)
    session = make_session(tmp_db, catalog, confirm=confirm)
    session.draw_new_batch()
    assert session.reset_progress() is False
    assert session.state.active is True


def test_corrupted_store_recovers_on_startup(tmp_db, catalog):
    from study_deck.db import init_db, write_value
    init_db(tmp_db)
    write_value(tmp_db, STORAGE_KEY, json.dumps({"active": True}), "2026-02-14T10:00:00")
    session = make_session(tmp_db, catalog)
    assert session.state.active is False
    assert session.state.current_batch == []
    assert set(session.state.decks) == set(catalog)


def test_default_notify_and_confirm(tmp_db, small_catalog, caplog):
    session = StudySession(small_catalog, db_path=tmp_db, rng=random.Random(1))
    session.draw_new_batch()
    with caplog.at_level("WARNING"):
        assert session.complete_batch() == INCOMPLETE
    assert "Discipline Check" in caplog.text
    session.toggle_topic(0)
    session.toggle_topic(1)
    assert session.complete_batch() == CANCELLED
    assert session.state != default_state()


def test_session_startup_reports_bad_store(tmp_path, small_catalog):
    blocker = tmp_path / "blocker"
    blocker.write_text("")
    with pytest.raises(StorageReadError):
        StudySession(small_catalog, db_path=str(blocker / "sub" / "deck.db"))
