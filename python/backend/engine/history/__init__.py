from backend.engine.history.history import MAX_ENTRIES, History, HistoryEntry

__all__ = ["History", "HistoryEntry", "MAX_ENTRIES"]
