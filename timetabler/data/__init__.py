"""Data models, store loading and persistence."""

from .loader import load_store, parse_store, save_store
from .repository import JsonScheduleStore, ScheduleRepository

__all__ = [
    # Loader
    "load_store",
    "parse_store",
    "save_store",
    # Persistence
    "JsonScheduleStore",
    "ScheduleRepository",
]
