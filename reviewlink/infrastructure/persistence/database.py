"""
SQLite Database Repository - Review and Short-Link Persistence
==============================================================

Two tables:
    customer_reviews - one row per review submission, with delivery status
    short_links      - short code -> review text, expiry and click count

A new connection is opened per operation, so the repository can be shared
by request handlers running in different threads.
"""

import sqlite3
import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Optional, Union

from ...domain.models import CustomerReview, ReviewStatus

logger = logging.getLogger(__name__)

DATABASE_FILE = "reviewlink.db"


class Database:
    """
    SQLite database for Review Link.

    Usage:
        db = Database("reviewlink.db")
        db.init()

        review_id = db.create_review(shop_name="SKS Jewellery", ...)
        db.update_review_status(review_id, ReviewStatus.SENT)
    """

    def __init__(self, db_path: Union[str, Path] = DATABASE_FILE):
        self.db_path = str(db_path)

    @contextmanager
    def connection(self):
        """Get database connection with context manager (commits on success)."""
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        finally:
            conn.close()

    def init(self):
        """Initialize database tables."""
        with self.connection() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS customer_reviews (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    shop_name TEXT NOT NULL,
                    shop_email TEXT NOT NULL,
                    customer_name TEXT NOT NULL,
                    customer_email TEXT NOT NULL,
                    phone_number TEXT NOT NULL,
                    product_name TEXT NOT NULL,
                    rating INTEGER NOT NULL,
                    review_text TEXT NOT NULL,
                    send_sms INTEGER DEFAULT 0,
                    send_whatsapp INTEGER DEFAULT 0,
                    status TEXT DEFAULT 'PENDING',
                    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                )
            """)

            conn.execute("""
                CREATE TABLE IF NOT EXISTS short_links (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    short_code TEXT NOT NULL UNIQUE,
                    review_text TEXT NOT NULL,
                    customer_name TEXT NOT NULL,
                    shop_name TEXT,
                    product_name TEXT,
                    created_at TEXT NOT NULL,
                    expires_at TEXT,
                    clicks INTEGER NOT NULL DEFAULT 0
                )
            """)

            conn.execute(
                "CREATE INDEX IF NOT EXISTS idx_short_links_expires_at ON short_links (expires_at)"
            )

            logger.info(f"Database initialized: {self.db_path}")

    # ── Review CRUD ────────────────────────────────────────────────

    def create_review(
        self,
        shop_name: str,
        shop_email: str,
        customer_name: str,
        customer_email: str,
        phone_number: str,
        product_name: str,
        rating: int,
        review_text: str,
        send_sms: bool = False,
        send_whatsapp: bool = False,
        status: ReviewStatus = ReviewStatus.PENDING,
    ) -> int:
        """Insert a review record and return its id."""
        with self.connection() as conn:
            cursor = conn.execute(
                """INSERT INTO customer_reviews
                   (shop_name, shop_email, customer_name, customer_email, phone_number,
                    product_name, rating, review_text, send_sms, send_whatsapp, status)
                   VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)""",
                (
                    shop_name, shop_email, customer_name, customer_email, phone_number,
                    product_name, rating, review_text, int(send_sms), int(send_whatsapp),
                    status.value,
                )
            )
            return cursor.lastrowid

    def get_review(self, review_id: int) -> Optional[CustomerReview]:
        """Get review by ID."""
        with self.connection() as conn:
            row = conn.execute(
                "SELECT * FROM customer_reviews WHERE id = ?", (review_id,)
            ).fetchone()
            return self._row_to_review(row) if row else None

    def update_review_status(self, review_id: int, status: ReviewStatus) -> bool:
        """Set the delivery status. Returns False if the review does not exist."""
        with self.connection() as conn:
            cursor = conn.execute(
                "UPDATE customer_reviews SET status = ? WHERE id = ?",
                (status.value, review_id)
            )
            return cursor.rowcount > 0

    def _row_to_review(self, row: sqlite3.Row) -> CustomerReview:
        """Convert database row to CustomerReview object."""
        return CustomerReview(
            id=row["id"],
            shop_name=row["shop_name"],
            shop_email=row["shop_email"],
            customer_name=row["customer_name"],
            customer_email=row["customer_email"],
            phone_number=row["phone_number"],
            product_name=row["product_name"],
            rating=row["rating"],
            review_text=row["review_text"],
            send_sms=bool(row["send_sms"]),
            send_whatsapp=bool(row["send_whatsapp"]),
            status=row["status"],
            created_at=row["created_at"] or ""
        )
