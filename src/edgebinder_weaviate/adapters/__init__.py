from .memory import InMemoryRecordStore

__all__ = [
    "InMemoryRecordStore",
]
