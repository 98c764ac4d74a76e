"""Database package."""

from .db import SqlKeyValueStore, configure_engine, get_session, init_db
from .models import KeyValue

__all__ = ["SqlKeyValueStore", "configure_engine", "get_session", "init_db", "KeyValue"]
