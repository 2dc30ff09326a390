from __future__ import annotations

import copy
import threading
from typing import Mapping, Optional, Sequence

from .store import BaseDocumentStore, WriteOp, apply_op


class InMemoryDocumentStore(BaseDocumentStore):
    """Process-local document store.

    Used by the test suite and by the ``memory`` backend for local runs.
    Documents are deep-copied on the way in and out so callers never share
    state with the store.
    """

    def __init__(self, initial: Optional[Mapping[str, Mapping[str, dict]]] = None):
        super().__init__()
        self._lock = threading.RLock()
        self._collections: dict[str, dict[str, dict]] = {}
        for collection, docs in (initial or {}).items():
            self._collections[collection] = {doc_id: copy.deepcopy(data) for doc_id, data in docs.items()}

    def get(self, collection: str, doc_id: str) -> Optional[dict]:
        with self._lock:
            data = self._collections.get(collection, {}).get(doc_id)
            return copy.deepcopy(data) if data is not None else None

    def _scan(self, collection: str) -> list[tuple[str, dict]]:
        with self._lock:
            docs = self._collections.get(collection, {})
            return [(doc_id, copy.deepcopy(data)) for doc_id, data in docs.items()]

    def _apply(self, ops: Sequence[WriteOp]) -> None:
        with self._lock:
            # stage every op first so a failing op leaves the store untouched
            staged: dict[tuple[str, str], Optional[dict]] = {}
            for op in ops:
                key = (op.collection, op.doc_id)
                if key in staged:
                    current = staged[key]
                else:
                    current = self._collections.get(op.collection, {}).get(op.doc_id)
                staged[key] = apply_op(current, op)

            for (collection, doc_id), data in staged.items():
                docs = self._collections.setdefault(collection, {})
                if data is None:
                    docs.pop(doc_id, None)
                else:
                    docs[doc_id] = data

    def collections(self) -> list[str]:
        with self._lock:
            return sorted(name for name, docs in self._collections.items() if docs)
