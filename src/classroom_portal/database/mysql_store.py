from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, Optional, Sequence

import mysql.connector

from ..core.exceptions import StoreError
from .connection import DatabaseConnection
from .mysql_base import db_cursor, dump_json_column, fetchall, fetchone, load_json_column
from .store import BaseDocumentStore, WriteOp, apply_op


class MySQLDocumentStore(BaseDocumentStore):
    """Document store persisted as JSON rows in a single ``documents`` table.

    Queries load the collection and filter in process; collections here are
    class-sized (tens to hundreds of documents). A commit runs in one
    transaction with the touched rows locked, so batches are all-or-nothing.
    """

    def __init__(self, conn_factory: DatabaseConnection):
        super().__init__()
        self._conn_factory = conn_factory

    @contextmanager
    def _cursor(self) -> Iterator[tuple]:
        try:
            with db_cursor(self._conn_factory) as pair:
                yield pair
        except mysql.connector.Error as e:
            raise StoreError(f"Document store unavailable: {e}") from e

    def get(self, collection: str, doc_id: str) -> Optional[dict]:
        with self._cursor() as (_, cur):
            cur.execute(
                "SELECT data FROM documents WHERE collection=%s AND doc_id=%s",
                (collection, doc_id),
            )
            row = fetchone(cur)
            return load_json_column(row["data"]) if row else None

    def _scan(self, collection: str) -> list[tuple[str, dict]]:
        with self._cursor() as (_, cur):
            cur.execute(
                "SELECT doc_id, data FROM documents WHERE collection=%s",
                (collection,),
            )
            return [(str(r["doc_id"]), load_json_column(r["data"])) for r in fetchall(cur)]

    def _apply(self, ops: Sequence[WriteOp]) -> None:
        with self._cursor() as (_, cur):
            staged: dict[tuple[str, str], Optional[dict]] = {}
            for op in ops:
                key = (op.collection, op.doc_id)
                if key in staged:
                    current = staged[key]
                else:
                    cur.execute(
                        "SELECT data FROM documents WHERE collection=%s AND doc_id=%s FOR UPDATE",
                        key,
                    )
                    row = fetchone(cur)
                    current = load_json_column(row["data"]) if row else None
                staged[key] = apply_op(current, op)

            for (collection, doc_id), data in staged.items():
                if data is None:
                    cur.execute(
                        "DELETE FROM documents WHERE collection=%s AND doc_id=%s",
                        (collection, doc_id),
                    )
                else:
                    cur.execute(
                        """
                        INSERT INTO documents(collection, doc_id, data)
                        VALUES(%s,%s,%s)
                        ON DUPLICATE KEY UPDATE data=VALUES(data)
                        """,
                        (collection, doc_id, dump_json_column(data)),
                    )
