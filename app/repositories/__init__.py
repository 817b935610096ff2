"""
Repository layer for data access.

Usage:
    from app.repositories import FighterRepository, EventRepository
    from app.core.database import SessionLocal

    db = SessionLocal()
    fighter = FighterRepository(db).find_by_name("Alex Pereira")
    db.close()
"""

from app.repositories.base import BaseRepository
from app.repositories.fighter_repository import FighterRepository
from app.repositories.event_repository import EventRepository, BoutRepository
from app.repositories.betting_repository import (
    BetTypeRepository,
    BoutResultRepository,
    UserBetRepository,
)

__all__ = [
    "BaseRepository",
    "FighterRepository",
    "EventRepository",
    "BoutRepository",
    "BetTypeRepository",
    "BoutResultRepository",
    "UserBetRepository",
]
