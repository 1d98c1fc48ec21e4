# Multi Search Services Package
"""
Backend services for Multi Search.

Services handle business logic, data persistence, and system integration.
"""

from .engine_store import EngineStore, get_engine_store
from .storage import JsonFileStorage, MemoryStorage, SqliteStorage

__all__ = [
    "EngineStore",
    "get_engine_store",
    "JsonFileStorage",
    "MemoryStorage",
    "SqliteStorage",
]
