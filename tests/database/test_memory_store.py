from __future__ import annotations

import pytest

from classroom_portal.core.exceptions import NotFoundError
from classroom_portal.database.memory_store import InMemoryDocumentStore
from classroom_portal.database.store import Filter


def _seeded() -> InMemoryDocumentStore:
    return InMemoryDocumentStore(
        {
            "attendance": {
                "2026-01-30": {"date": "2026-01-30", "summary": {"present": 1}},
                "2026-02-01": {"date": "2026-02-01", "summary": {"present": 2}},
                "2026-02-15": {"date": "2026-02-15", "summary": {"present": 3}},
            }
        }
    )


def test_range_query_with_order_and_limit():
    store = _seeded()

    docs = store.query(
        "attendance",
        [Filter("date", ">=", "2026-02-01"), Filter("date", "<=", "2026-02-28")],
        order_by="date",
        descending=True,
    )
    assert [d.id for d in docs] == ["2026-02-15", "2026-02-01"]

    latest = store.query("attendance", order_by="date", descending=True, limit=1)
    assert [d.id for d in latest] == ["2026-02-15"]
    assert store.count("attendance") == 3


def test_dotted_filter_and_in_operator():
    store = InMemoryDocumentStore()
    store.set("assignments", "a1", {"status_map": {"s1": {"status": "Assigned"}}})
    store.set("assignments", "a2", {"status_map": {"s1": {"status": "Graded"}}})
    store.set("assignments", "a3", {"status_map": {"s2": {"status": "Assigned"}}})

    docs = store.query("assignments", [Filter("status_map.s1.status", "in", ["Assigned", "Submitted"])])

    assert [d.id for d in docs] == ["a1"]


def test_update_by_dot_path_keeps_siblings():
    store = InMemoryDocumentStore()
    store.set("assignments", "a1", {"title": "Essay", "status_map": {"s1": {"status": "Assigned", "grade": ""}}})

    store.update("assignments", "a1", {"status_map.s1.status": "Submitted"})

    data = store.get("assignments", "a1")
    assert data["title"] == "Essay"
    assert data["status_map"]["s1"] == {"status": "Submitted", "grade": ""}


def test_update_missing_document_raises():
    store = InMemoryDocumentStore()
    with pytest.raises(NotFoundError):
        store.update("assignments", "missing", {"title": "x"})


def test_set_with_merge_deep_merges_maps():
    store = InMemoryDocumentStore()
    store.set("users", "u1", {"email": "a@x.com", "profile": {"role": "student"}})

    store.set("users", "u1", {"profile": {"student_id": "s1"}}, merge=True)

    assert store.get("users", "u1") == {"email": "a@x.com", "profile": {"role": "student", "student_id": "s1"}}


def test_batch_is_all_or_nothing():
    store = InMemoryDocumentStore()
    store.set("submissions", "a1_s1", {"status": "submitted"})

    batch = store.batch()
    batch.update("submissions", "a1_s1", {"status": "graded"})
    batch.update("assignments", "a1", {"status_map.s1.status": "Graded"})
    with pytest.raises(NotFoundError):
        batch.commit()

    assert store.get("submissions", "a1_s1") == {"status": "submitted"}
    assert store.get("assignments", "a1") is None
    assert store.collections() == ["submissions"]


def test_returned_documents_are_copies():
    store = InMemoryDocumentStore()
    store.set("attendees", "s1", {"name": "Ann"})

    data = store.get("attendees", "s1")
    data["name"] = "changed"

    assert store.get("attendees", "s1") == {"name": "Ann"}


def test_subscribe_pushes_initial_and_changed_snapshots():
    store = InMemoryDocumentStore()
    seen: list[list[str]] = []

    unsubscribe = store.subscribe(
        "submissions",
        lambda docs: seen.append(sorted(d.id for d in docs)),
        [Filter("assignment_id", "==", "a1")],
    )
    store.set("submissions", "a1_s1", {"assignment_id": "a1"})
    store.set("submissions", "a2_s1", {"assignment_id": "a2"})
    unsubscribe()
    store.set("submissions", "a1_s2", {"assignment_id": "a1"})

    assert seen == [[], ["a1_s1"], ["a1_s1"]]


def test_invalid_document_id_rejected():
    store = InMemoryDocumentStore()
    with pytest.raises(ValueError):
        store.set("attendees", "a/b", {"name": "x"})
