"""
Database models.

Usage:
    from app.models import Event, Fighter, Bout, BetType, BoutResult, UserBet
"""
from app.models.models import (
    Base,
    Event,
    Fighter,
    Bout,
    BetType,
    BoutResult,
    UserBet,
)

__all__ = [
    "Base",
    "Event",
    "Fighter",
    "Bout",
    "BetType",
    "BoutResult",
    "UserBet",
]
