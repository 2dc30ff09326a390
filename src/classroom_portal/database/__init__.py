from .store import Document, DocumentStore, Filter, WriteBatch

__all__ = ["Document", "DocumentStore", "Filter", "WriteBatch"]
