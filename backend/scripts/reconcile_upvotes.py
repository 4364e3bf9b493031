#!/usr/bin/env python
"""
Rebuild cached upvote counters from the upvote ledger.

``answers.upvote_count`` and ``mentor_profiles.total_upvotes`` are caches of
the ``upvotes`` table. This script recomputes both and corrects any drift.

Can be run via:
- Cron: 0 3 * * * cd /path/to/backend && python scripts/reconcile_upvotes.py
- Manual: python scripts/reconcile_upvotes.py

Options:
    --dry-run: Report drifted counters without writing corrections
"""

import argparse
import sys
from pathlib import Path

# Add the backend directory to the path for imports
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from loguru import logger
from sqlalchemy.orm import Session

from repositories.database import SessionLocal
from services.upvote_service import UpvoteService


def main() -> int:
    """Run the counter reconciliation."""
    parser = argparse.ArgumentParser(
        description="Rebuild cached upvote counters from the upvote ledger"
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Report drifted counters without writing corrections",
    )

    args = parser.parse_args()

    db: Session = SessionLocal()
    try:
        result = UpvoteService.reconcile_counters(db, dry_run=args.dry_run)
        prefix = "[DRY RUN] Would correct" if args.dry_run else "Corrected"
        logger.info(
            f"{prefix} {result.answers_fixed} answer counters and "
            f"{result.profiles_fixed} mentor profile totals"
        )
        return 0
    except Exception as e:
        logger.error(f"Upvote reconciliation failed: {e}")
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
