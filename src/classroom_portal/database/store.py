"""Document store abstraction.

Every feature repository talks to a ``DocumentStore``: named collections of
JSON-like documents addressed by string ids. Writes are expressed as
``WriteOp`` values so that a single write and a multi-document batch go
through the same atomic ``commit`` path in every backend.
"""

from __future__ import annotations

import copy
import threading
import uuid
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Mapping, Optional, Protocol, Sequence

from ..core.exceptions import NotFoundError

_OPERATORS = frozenset({"==", "!=", "<", "<=", ">", ">=", "in"})
_MISSING = object()


@dataclass(frozen=True)
class Document:
    id: str
    data: dict


@dataclass(frozen=True)
class Filter:
    """Equality/range condition on a (possibly dotted) field path.

    Documents that lack the field never match, whatever the operator.
    """

    field: str
    op: str
    value: Any

    def __post_init__(self):
        if self.op not in _OPERATORS:
            raise ValueError(f"Unsupported filter operator: {self.op!r}")

    def matches(self, data: Mapping[str, Any]) -> bool:
        actual = get_path(data, self.field)
        if actual is _MISSING:
            return False
        try:
            if self.op == "==":
                return actual == self.value
            if self.op == "!=":
                return actual != self.value
            if self.op == "<":
                return actual < self.value
            if self.op == "<=":
                return actual <= self.value
            if self.op == ">":
                return actual > self.value
            if self.op == ">=":
                return actual >= self.value
            return actual in self.value
        except TypeError:
            # mixed types never compare equal/ordered
            return False


@dataclass(frozen=True)
class WriteOp:
    kind: str  # "set" | "update" | "delete"
    collection: str
    doc_id: str
    data: Optional[dict] = None
    merge: bool = False


def new_document_id() -> str:
    return uuid.uuid4().hex[:20]


def get_path(data: Mapping[str, Any], path: str) -> Any:
    node: Any = data
    for part in path.split("."):
        if not isinstance(node, Mapping) or part not in node:
            return _MISSING
        node = node[part]
    return node


def has_path(data: Mapping[str, Any], path: str) -> bool:
    return get_path(data, path) is not _MISSING


def set_path(data: dict, path: str, value: Any) -> None:
    """Assign ``value`` at a dotted path, creating intermediate maps."""
    parts = path.split(".")
    node = data
    for part in parts[:-1]:
        child = node.get(part)
        if not isinstance(child, dict):
            child = {}
            node[part] = child
        node = child
    node[parts[-1]] = value


def deep_merge(base: Mapping[str, Any], changes: Mapping[str, Any]) -> dict:
    merged = copy.deepcopy(dict(base))
    for key, value in changes.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, Mapping):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def apply_op(current: Optional[dict], op: WriteOp) -> Optional[dict]:
    """Return the document state after ``op``; ``None`` means deleted."""
    if op.kind == "set":
        if op.merge and current is not None:
            return deep_merge(current, op.data or {})
        return copy.deepcopy(op.data or {})

    if op.kind == "update":
        if current is None:
            raise NotFoundError(f"{op.collection}/{op.doc_id} does not exist")
        updated = copy.deepcopy(current)
        for path, value in (op.data or {}).items():
            set_path(updated, path, copy.deepcopy(value))
        return updated

    if op.kind == "delete":
        return None

    raise ValueError(f"Unknown write kind: {op.kind!r}")


def run_query(
    items: Iterable[tuple[str, dict]],
    filters: Sequence[Filter] = (),
    *,
    order_by: Optional[str] = None,
    descending: bool = False,
    limit: Optional[int] = None,
) -> list[Document]:
    docs = [Document(id=doc_id, data=data) for doc_id, data in items if all(f.matches(data) for f in filters)]

    if order_by:
        # like the hosted stores: ordering on a field drops documents without it
        docs = [d for d in docs if has_path(d.data, order_by)]
        docs.sort(key=lambda d: (get_path(d.data, order_by), d.id), reverse=descending)

    if limit is not None:
        docs = docs[: max(int(limit), 0)]
    return docs


class DocumentStore(Protocol):
    """Operations the services need from the hosted document database."""

    def get(self, collection: str, doc_id: str) -> Optional[dict]:
        raise NotImplementedError

    def query(
        self,
        collection: str,
        filters: Sequence[Filter] = (),
        *,
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> list[Document]:
        raise NotImplementedError

    def count(self, collection: str, filters: Sequence[Filter] = ()) -> int:
        raise NotImplementedError

    def add(self, collection: str, data: dict) -> str:
        raise NotImplementedError

    def set(self, collection: str, doc_id: str, data: dict, *, merge: bool = False) -> None:
        raise NotImplementedError

    def update(self, collection: str, doc_id: str, changes: dict) -> None:
        raise NotImplementedError

    def delete(self, collection: str, doc_id: str) -> None:
        raise NotImplementedError

    def batch(self) -> "WriteBatch":
        raise NotImplementedError

    def subscribe(
        self,
        collection: str,
        callback: Callable[[list[Document]], None],
        filters: Sequence[Filter] = (),
    ) -> Callable[[], None]:
        raise NotImplementedError


class WriteBatch:
    """Collects writes and commits them atomically (all or nothing)."""

    def __init__(self, store: "BaseDocumentStore"):
        self._store = store
        self._ops: list[WriteOp] = []
        self._committed = False

    def __len__(self) -> int:
        return len(self._ops)

    def set(self, collection: str, doc_id: str, data: dict, *, merge: bool = False) -> "WriteBatch":
        self._ops.append(WriteOp("set", collection, doc_id, dict(data), merge))
        return self

    def update(self, collection: str, doc_id: str, changes: dict) -> "WriteBatch":
        self._ops.append(WriteOp("update", collection, doc_id, dict(changes)))
        return self

    def delete(self, collection: str, doc_id: str) -> "WriteBatch":
        self._ops.append(WriteOp("delete", collection, doc_id))
        return self

    def commit(self) -> None:
        if self._committed:
            raise RuntimeError("Batch already committed")
        self._committed = True
        if self._ops:
            self._store.commit(self._ops)


@dataclass(eq=False)
class _Listener:
    collection: str
    filters: tuple[Filter, ...]
    callback: Callable[[list[Document]], None]


class BaseDocumentStore:
    """Shared query/write/subscription plumbing.

    Backends implement ``get``, ``_scan`` (all documents of a collection) and
    ``_apply`` (atomically apply a list of write ops).
    """

    def __init__(self):
        self._listeners: list[_Listener] = []
        self._listeners_lock = threading.Lock()

    def get(self, collection: str, doc_id: str) -> Optional[dict]:
        raise NotImplementedError

    def _scan(self, collection: str) -> list[tuple[str, dict]]:
        raise NotImplementedError

    def _apply(self, ops: Sequence[WriteOp]) -> None:
        raise NotImplementedError

    def query(
        self,
        collection: str,
        filters: Sequence[Filter] = (),
        *,
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> list[Document]:
        return run_query(self._scan(collection), filters, order_by=order_by, descending=descending, limit=limit)

    def count(self, collection: str, filters: Sequence[Filter] = ()) -> int:
        return len(self.query(collection, filters))

    def add(self, collection: str, data: dict) -> str:
        doc_id = new_document_id()
        self.set(collection, doc_id, data)
        return doc_id

    def set(self, collection: str, doc_id: str, data: dict, *, merge: bool = False) -> None:
        self.commit([WriteOp("set", collection, doc_id, dict(data), merge)])

    def update(self, collection: str, doc_id: str, changes: dict) -> None:
        self.commit([WriteOp("update", collection, doc_id, dict(changes))])

    def delete(self, collection: str, doc_id: str) -> None:
        self.commit([WriteOp("delete", collection, doc_id)])

    def batch(self) -> WriteBatch:
        return WriteBatch(self)

    def commit(self, ops: Sequence[WriteOp]) -> None:
        ops = list(ops)
        for op in ops:
            if not op.collection or not op.doc_id or "/" in op.doc_id:
                raise ValueError(f"Invalid document path: {op.collection}/{op.doc_id}")
        self._apply(ops)
        self._notify({op.collection for op in ops})

    def subscribe(
        self,
        collection: str,
        callback: Callable[[list[Document]], None],
        filters: Sequence[Filter] = (),
    ) -> Callable[[], None]:
        """Push the matching documents now and after every write to ``collection``."""
        listener = _Listener(collection, tuple(filters), callback)
        with self._listeners_lock:
            self._listeners.append(listener)
        callback(self.query(collection, listener.filters))

        def unsubscribe() -> None:
            with self._listeners_lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, collections: set[str]) -> None:
        with self._listeners_lock:
            targets = [l for l in self._listeners if l.collection in collections]
        for listener in targets:
            listener.callback(self.query(listener.collection, listener.filters))
