#!/usr/bin/env python3
"""
Database initialization script
Creates the document table and optionally seeds a demo journal
"""

import sys
import os

# Add parent directory to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

# Load .env file
from dotenv import load_dotenv
load_dotenv()

from betjournal.models import Base, engine, SessionLocal
from betjournal.schemas import Bet, BetResult, ConfidenceLevel
from betjournal.services.cycle import new_cycle
from betjournal.services.journal import JournalService, DEFAULT_STARTING_BANKROLL
from betjournal.services.storage import SQLAlchemyDocumentStore
from datetime import date, timedelta
import logging
from sqlalchemy import text, inspect

logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)


def init_database(drop_existing: bool = False):
    """
    Initialize database tables

    Args:
        drop_existing: If True, drops all tables first (DANGER: data loss!)
    """
    logger.info("🔧 Initializing bet journal database...")

    if drop_existing:
        logger.warning("⚠️  Dropping all existing tables!")
        response = input("Are you sure? This will delete all data. Type 'yes' to confirm: ")
        if response.lower() != 'yes':
            logger.info("Aborted.")
            return

        Base.metadata.drop_all(bind=engine)
        logger.info("✅ Existing tables dropped")

    Base.metadata.create_all(bind=engine)
    logger.info("✅ Database tables created successfully")

    inspector = inspect(engine)
    tables = inspector.get_table_names()
    logger.info("📋 Tables: %s", ', '.join(tables))

    return True


def seed_demo_data(journal: JournalService = None):
    """Write a small demo journal, the default bankroll and an idle cycle

    Demo bets carry fixed ids, so seeding twice replaces them instead of
    adding a second copy.
    """
    logger.info("🌱 Seeding demo data...")

    if journal is None:
        journal = JournalService(SQLAlchemyDocumentStore(create_tables=False))
    today = date.today()
    demo = [
        Bet(id="demo-1", date=today - timedelta(days=6), match="Arsenal vs Chelsea", selection="Arsenal DNB",
            league="Premier League", odds=1.85, stake=100, result=BetResult.WIN,
            bookmaker="Pinnacle", confidence=ConfidenceLevel.HIGH, market_type="Asian Handicap"),
        Bet(id="demo-2", date=today - timedelta(days=4), match="Inter vs Milan", selection="Over 2.5",
            league="Serie A", odds=2.05, stake=80, result=BetResult.LOSS,
            bookmaker="Bet365", market_type="Over/Under", emotional_state="Excited"),
        Bet(id="demo-3", date=today - timedelta(days=2), sport="Tennis", match="Sinner vs Alcaraz",
            selection="Sinner", league="ATP Finals", odds=2.40, stake=50,
            result=BetResult.HALF_WIN, confidence=ConfidenceLevel.LOW),
        Bet(id="demo-4", date=today, match="Real Madrid vs Barcelona", selection="BTTS Yes",
            league="La Liga", odds=1.70, stake=120, market_type="BTTS"),
    ]

    try:
        for bet in demo:
            journal.save_bet(bet)
        journal.save_starting_bankroll(DEFAULT_STARTING_BANKROLL)
        if journal.get_cycle_state() is None:
            journal.save_cycle_state(new_cycle())
        logger.info("✅ Demo data seeded (%d bets)", len(demo))
    except Exception as e:
        logger.error("❌ Error seeding data: %s", e)
        raise


def check_connection():
    """Test database connection"""
    try:
        db = SessionLocal()
        db.execute(text("SELECT 1"))
        db.close()
        logger.info("✅ Database connection successful")
        return True
    except Exception as e:
        logger.error("❌ Database connection failed: %s", e)
        return False


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="Initialize bet journal database")
    parser.add_argument("--drop", action="store_true", help="Drop existing tables (DANGER!)")
    parser.add_argument("--seed", action="store_true", help="Seed a demo journal")
    parser.add_argument("--check", action="store_true", help="Only check connection")

    args = parser.parse_args()

    if args.check:
        check_connection()
    else:
        if check_connection():
            init_database(drop_existing=args.drop)

            if args.seed:
                seed_demo_data()

            logger.info("🎉 Database initialization complete!")
        else:
            logger.error("Cannot initialize database - connection failed")
            sys.exit(1)
