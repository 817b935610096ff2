#!/usr/bin/env python3
"""
Initialize database tables from SQLAlchemy models.

Creates events, fighters, bouts, bet_types, bout_results and user_bets.
Optionally seeds the bet types produced by results ingestion.

Usage:
    python scripts/init_database.py
    python scripts/init_database.py --seed-bet-types
"""
import argparse
import sys
from pathlib import Path

# Add project root to Python path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

import logging

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def seed_bet_types() -> None:
    from app.core.database import SessionLocal
    from app.services.betting_service import BettingService
    from app.services.result_classifier import KO_TKO, DECISION, SPLIT_DECISION, UNANIMOUS_DECISION

    db = SessionLocal()
    try:
        service = BettingService(db)
        for name in (KO_TKO, DECISION, SPLIT_DECISION, UNANIMOUS_DECISION):
            bet_type = service.get_or_create_bet_type(name)
            if bet_type is None:
                logger.error(f"Failed to seed bet type {name!r}")
            else:
                logger.info(f"Bet type {bet_type.id}: {bet_type.name}")
    finally:
        db.close()


def main():
    """Create all database tables from models."""
    parser = argparse.ArgumentParser(description="Create database tables")
    parser.add_argument("--seed-bet-types", action="store_true", help="Insert the standard result bet types")
    args = parser.parse_args()

    from app.core.database import init_db

    logger.info("Creating database tables from SQLAlchemy models...")
    init_db()
    logger.info("All database tables created successfully")

    if args.seed_bet_types:
        seed_bet_types()


if __name__ == "__main__":
    main()
