"""
Repositories for bet types, bout results and user bets.
"""
from typing import Optional, List

from sqlalchemy.orm import joinedload

from app.models import BetType, BoutResult, Bout, UserBet
from app.repositories.base import BaseRepository


class BetTypeRepository(BaseRepository[BetType]):
    """Repository for the bet type taxonomy."""

    def __init__(self, db):
        super().__init__(BetType, db)

    def find_by_name(self, name: str) -> Optional[BetType]:
        return self.where_first(BetType.name == name)


class BoutResultRepository(BaseRepository[BoutResult]):
    """Repository for recorded bout outcomes (keyed by bout id)."""

    def __init__(self, db):
        super().__init__(BoutResult, db)

    def find_by_bout(self, bout_id: str) -> Optional[BoutResult]:
        return self.find_by_id(bout_id)

    def find_by_event(self, event_id: str) -> List[BoutResult]:
        """Results of every bout in an event, with winner and bet type loaded."""
        return self.db.query(BoutResult).join(
            Bout, BoutResult.bout_id == Bout.id
        ).options(
            joinedload(BoutResult.winner),
            joinedload(BoutResult.bet_type),
        ).filter(
            Bout.event_id == event_id
        ).all()


class UserBetRepository(BaseRepository[UserBet]):
    """Repository for user predictions, keyed by (user_id, bout_id, bet_type_id)."""

    def __init__(self, db):
        super().__init__(UserBet, db)

    def find_by_key(self, user_id: str, bout_id: str, bet_type_id: int) -> Optional[UserBet]:
        return self.find_by_id((user_id, bout_id, bet_type_id))

    def find_by_user(self, user_id: str) -> List[UserBet]:
        """A user's bets, newest first."""
        return self.db.query(UserBet).filter(
            UserBet.user_id == user_id
        ).order_by(UserBet.created_at.desc()).all()

    def find_by_bout(self, bout_id: str) -> List[UserBet]:
        """All bets on a bout, newest first."""
        return self.db.query(UserBet).filter(
            UserBet.bout_id == bout_id
        ).order_by(UserBet.created_at.desc()).all()
