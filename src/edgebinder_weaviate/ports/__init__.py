from .record_store import IRecordStore, translate_store_errors

__all__ = [
    "IRecordStore",
    "translate_store_errors",
]
