"""
Database models for the MMA Picks API.

Tables: events, fighters, bouts, bet_types, bout_results, user_bets.
"""
import uuid

from sqlalchemy import Column, String, Integer, DateTime, Date, ForeignKey, Text, Index, UniqueConstraint
from sqlalchemy.orm import relationship, declarative_base

from app.utils.timezone import utc_now

Base = declarative_base()


def _uuid() -> str:
    return str(uuid.uuid4())


class Event(Base):
    """A card of bouts on a given date at a given location."""
    __tablename__ = "events"

    id = Column(String(36), primary_key=True, default=_uuid)
    name = Column(Text, nullable=False, index=True)
    date = Column(Text, nullable=False)  # free text as supplied, e.g. "June 07, 2025"
    event_date = Column(Date, nullable=True, index=True)  # calendar parse of `date`, NULL if unparsable
    location = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)

    bouts = relationship(
        "Bout",
        back_populates="event",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="Bout.created_at",
    )


class Fighter(Base):
    """A fighter, deduplicated by exact name, carrying a running W-L-D tally."""
    __tablename__ = "fighters"

    id = Column(String(36), primary_key=True, default=_uuid)
    name = Column(Text, nullable=False)
    wins = Column(Integer, nullable=False, default=0)
    losses = Column(Integer, nullable=False, default=0)
    draws = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)

    __table_args__ = (
        UniqueConstraint("name", name="uq_fighters_name"),
    )

    @property
    def record(self) -> str:
        return f"{self.wins}-{self.losses}-{self.draws}"


class Bout(Base):
    """A fight between two fighters. Left/right is display order, not winner/loser."""
    __tablename__ = "bouts"

    id = Column(String(36), primary_key=True, default=_uuid)
    event_id = Column(String(36), ForeignKey("events.id", ondelete="CASCADE"), nullable=False)
    fighter_left_id = Column(String(36), ForeignKey("fighters.id", ondelete="CASCADE"), nullable=False)
    fighter_right_id = Column(String(36), ForeignKey("fighters.id", ondelete="CASCADE"), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)

    event = relationship("Event", back_populates="bouts")
    fighter_left = relationship("Fighter", foreign_keys=[fighter_left_id])
    fighter_right = relationship("Fighter", foreign_keys=[fighter_right_id])
    result = relationship("BoutResult", back_populates="bout", uselist=False, passive_deletes=True)

    __table_args__ = (
        Index("idx_bouts_event_id", "event_id"),
        Index("idx_bouts_fighter_left_id", "fighter_left_id"),
        Index("idx_bouts_fighter_right_id", "fighter_right_id"),
    )


class BetType(Base):
    """Outcome category a bet is placed on (KO/TKO, Split Decision, ...)."""
    __tablename__ = "bet_types"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(Text, nullable=False)
    description = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)

    __table_args__ = (
        UniqueConstraint("name", name="uq_bet_types_name"),
    )


class BoutResult(Base):
    """Recorded outcome of a bout, one per bout."""
    __tablename__ = "bout_results"

    bout_id = Column(String(36), ForeignKey("bouts.id", ondelete="CASCADE"), primary_key=True)
    winner_id = Column(String(36), ForeignKey("fighters.id", ondelete="SET NULL"), nullable=True)
    bet_type_id = Column(Integer, ForeignKey("bet_types.id", ondelete="SET NULL"), nullable=True)
    round = Column(Integer, nullable=True)  # 0 = unknown
    time = Column(Text, nullable=True)
    details = Column(Text, nullable=True)  # raw result text from the feed
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)

    bout = relationship("Bout", back_populates="result")
    winner = relationship("Fighter")
    bet_type = relationship("BetType")

    __table_args__ = (
        Index("idx_bout_results_winner_id", "winner_id"),
        Index("idx_bout_results_bet_type_id", "bet_type_id"),
    )


class UserBet(Base):
    """A user's prediction for one (bout, bet type); at most one per user."""
    __tablename__ = "user_bets"

    user_id = Column(String(36), primary_key=True)
    bout_id = Column(String(36), ForeignKey("bouts.id", ondelete="CASCADE"), primary_key=True)
    bet_type_id = Column(Integer, ForeignKey("bet_types.id", ondelete="CASCADE"), primary_key=True)
    predicted_value = Column(Text, nullable=False)  # id of the fighter picked to win
    result = Column(Text, nullable=True)  # "won" / "lost" once settled
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)

    __table_args__ = (
        Index("idx_user_bets_bout_id", "bout_id"),
    )
