from backend.engine.notifier.notifier import CompletionNotifier

__all__ = ["CompletionNotifier"]
