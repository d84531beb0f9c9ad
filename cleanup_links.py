"""
Short Link Cleanup
==================

Deletes short links that have expired or are older than the retention
window (SHORT_LINK_RETENTION_DAYS, default 30 days).

Run it periodically, e.g. from cron:
    python cleanup_links.py
    python cleanup_links.py --days 14
"""

import argparse
import logging
import sys

from reviewlink.application.short_links import ShortLinkService
from reviewlink.infrastructure.config import get_settings
from reviewlink.infrastructure.persistence import Database, SQLiteLinkStore

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def run_cleanup(older_than_days=None) -> int:
    """Delete expired links and return how many were removed."""
    settings = get_settings()
    days = older_than_days if older_than_days is not None else settings.short_links.retention_days

    db = Database(settings.database_file)
    db.init()
    service = ShortLinkService(SQLiteLinkStore(db), base_url=settings.short_links.base_url)

    logger.info(f"Cleaning up short links in {settings.database_file} (retention: {days} days)")
    return service.cleanup_expired(older_than_days=days)


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Delete expired short links")
    parser.add_argument(
        "--days", type=int, default=None,
        help="delete links created more than this many days ago (default: SHORT_LINK_RETENTION_DAYS)"
    )
    args = parser.parse_args(argv)

    deleted = run_cleanup(args.days)
    print(f"Deleted {deleted} short link(s)")
    return 0


if __name__ == "__main__":
    sys.exit(main())
