"""
SQLite Link Store
=================

LinkStore implementation on the `short_links` table of the review database.
Timestamps are stored as UTC ISO-8601 strings so they compare correctly as
text in SQL.
"""

import logging
import sqlite3
from datetime import datetime, timezone
from typing import Optional

from ...domain.models import ShortLink
from ...domain.ports import DuplicateShortCodeError, LinkStore
from .database import Database

logger = logging.getLogger(__name__)


def _to_db(value: Optional[datetime]) -> Optional[str]:
    if value is None:
        return None
    return value.astimezone(timezone.utc).isoformat()


def _from_db(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


class SQLiteLinkStore(LinkStore):
    """
    Short links in SQLite.

    Usage:
        db = Database("reviewlink.db")
        db.init()
        store = SQLiteLinkStore(db)
        store.get("a3f9k2")
    """

    def __init__(self, database: Database):
        self._db = database

    def get(self, short_code: str) -> Optional[ShortLink]:
        with self._db.connection() as conn:
            row = conn.execute(
                "SELECT * FROM short_links WHERE short_code = ?", (short_code,)
            ).fetchone()
            return self._row_to_link(row) if row else None

    def insert(self, link: ShortLink) -> None:
        try:
            with self._db.connection() as conn:
                conn.execute(
                    """INSERT INTO short_links
                       (short_code, review_text, customer_name, shop_name, product_name,
                        created_at, expires_at, clicks)
                       VALUES (?, ?, ?, ?, ?, ?, ?, ?)""",
                    (
                        link.short_code, link.review_text, link.customer_name,
                        link.shop_name, link.product_name,
                        _to_db(link.created_at), _to_db(link.expires_at), link.clicks,
                    )
                )
        except sqlite3.IntegrityError as e:
            raise DuplicateShortCodeError(link.short_code) from e

    def increment_clicks(self, short_code: str) -> None:
        with self._db.connection() as conn:
            conn.execute(
                "UPDATE short_links SET clicks = clicks + 1 WHERE short_code = ?",
                (short_code,)
            )

    def delete_expired(self, now: datetime, created_before: datetime) -> int:
        with self._db.connection() as conn:
            cursor = conn.execute(
                """DELETE FROM short_links
                   WHERE (expires_at IS NOT NULL AND expires_at <= ?)
                      OR created_at < ?""",
                (_to_db(now), _to_db(created_before))
            )
            deleted = cursor.rowcount
        logger.info(f"Deleted {deleted} expired short links")
        return deleted

    def _row_to_link(self, row: sqlite3.Row) -> ShortLink:
        """Convert database row to ShortLink object."""
        return ShortLink(
            short_code=row["short_code"],
            review_text=row["review_text"],
            customer_name=row["customer_name"],
            shop_name=row["shop_name"],
            product_name=row["product_name"],
            created_at=_from_db(row["created_at"]),
            expires_at=_from_db(row["expires_at"]),
            clicks=row["clicks"]
        )
