from backend.engine.shuffler.shuffle import Shuffler

__all__ = ["Shuffler"]
