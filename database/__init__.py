from .manager import DatabaseManager, NoOpCollection, get_db

__all__ = ["DatabaseManager", "NoOpCollection", "get_db"]
