from .database import DATABASE_FILE, Database
from .link_store import SQLiteLinkStore

__all__ = ["DATABASE_FILE", "Database", "SQLiteLinkStore"]
