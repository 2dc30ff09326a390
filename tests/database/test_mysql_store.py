from __future__ import annotations

import json

import mysql.connector
import pytest

from classroom_portal.core.exceptions import NotFoundError, StoreError
from classroom_portal.database.mysql_store import MySQLDocumentStore
from classroom_portal.database.store import Filter


class FakeCursor:
    def __init__(self, conn):
        self._conn = conn
        self._result = []

    def execute(self, sql, params=()):
        sql = " ".join(sql.split())
        tables = self._conn.pending
        if sql.startswith("SELECT data FROM documents"):
            data = tables.get(tuple(params))
            self._result = [{"data": data}] if data is not None else []
        elif sql.startswith("SELECT doc_id, data FROM documents"):
            self._result = [{"doc_id": d, "data": v} for (c, d), v in tables.items() if c == params[0]]
        elif sql.startswith("DELETE FROM documents"):
            tables.pop(tuple(params), None)
        elif sql.startswith("INSERT INTO documents"):
            collection, doc_id, data = params
            tables[(collection, doc_id)] = data
        else:
            raise AssertionError(f"unexpected SQL: {sql}")
        self._conn.statements.append(sql)

    def fetchone(self):
        return self._result[0] if self._result else None

    def fetchall(self):
        return list(self._result)

    def close(self):
        pass


class FakeConnection:
    def __init__(self, tables, statements):
        self._tables = tables
        self.pending = dict(tables)
        self.statements = statements
        self.rolled_back = False

    def cursor(self, dictionary=False):
        return FakeCursor(self)

    def commit(self):
        self._tables.clear()
        self._tables.update(self.pending)

    def rollback(self):
        self.rolled_back = True

    def close(self):
        pass


class FakeConnFactory:
    def __init__(self):
        self.tables: dict[tuple[str, str], str] = {}
        self.statements: list[str] = []
        self.connections: list[FakeConnection] = []

    def connect(self, *, with_database=True):
        conn = FakeConnection(self.tables, self.statements)
        self.connections.append(conn)
        return conn


class DownConnFactory:
    def connect(self, *, with_database=True):
        raise mysql.connector.Error(msg="Can't connect to MySQL server")


def test_set_get_and_query_through_json_rows():
    factory = FakeConnFactory()
    store = MySQLDocumentStore(factory)

    store.set("attendees", "s1", {"name": "Ann", "email": "a@x.com"})
    store.set("attendees", "s2", {"name": "Bob", "email": "b@x.com"})

    assert json.loads(factory.tables[("attendees", "s1")]) == {"name": "Ann", "email": "a@x.com"}
    assert store.get("attendees", "s2") == {"name": "Bob", "email": "b@x.com"}
    assert [d.id for d in store.query("attendees", [Filter("email", "==", "b@x.com")])] == ["s2"]
    assert store.get("attendees", "missing") is None


def test_commit_locks_rows_and_writes_once():
    factory = FakeConnFactory()
    store = MySQLDocumentStore(factory)
    store.set("attendees", "s1", {"name": "Ann"})
    factory.statements.clear()

    batch = store.batch()
    batch.set("deleted_attendees", "s1", {"name": "Ann", "original_id": "s1"})
    batch.delete("attendees", "s1")
    batch.commit()

    assert all("FOR UPDATE" in s for s in factory.statements if s.startswith("SELECT"))
    assert ("attendees", "s1") not in factory.tables
    assert ("deleted_attendees", "s1") in factory.tables


def test_failed_batch_rolls_back():
    factory = FakeConnFactory()
    store = MySQLDocumentStore(factory)
    store.set("submissions", "a1_s1", {"status": "submitted"})

    batch = store.batch()
    batch.update("submissions", "a1_s1", {"status": "graded"})
    batch.update("assignments", "a1", {"status_map.s1.status": "Graded"})
    with pytest.raises(NotFoundError):
        batch.commit()

    assert factory.connections[-1].rolled_back
    assert store.get("submissions", "a1_s1") == {"status": "submitted"}


def test_connector_errors_surface_as_store_error():
    store = MySQLDocumentStore(DownConnFactory())

    with pytest.raises(StoreError):
        store.get("attendees", "s1")
