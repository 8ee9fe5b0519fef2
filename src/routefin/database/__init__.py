"""Database layer for routefin application."""

from routefin.database.base import CacheStore, Database, LedgerReader, RouteDirectory
from routefin.database.factories import create_sqlite_database

__all__ = ["CacheStore", "Database", "LedgerReader", "RouteDirectory", "create_sqlite_database"]
