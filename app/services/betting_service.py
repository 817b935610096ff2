"""
Betting ledger: bet types and user predictions.

A user bet is keyed by (user_id, bout_id, bet_type_id); placing a bet on an
existing key replaces the prediction. ``predicted_value`` holds the id of the
fighter the user picks to win the bout by the bet's bet type, and
``settle_bout`` marks each bet "won" or "lost" once the bout has a result.
"""
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.core import metrics
from app.models import BetType, UserBet
from app.repositories import (
    BetTypeRepository,
    BoutRepository,
    BoutResultRepository,
    UserBetRepository,
)

logger = logging.getLogger(__name__)

WON = "won"
LOST = "lost"


def _iso(value) -> Optional[str]:
    return value.isoformat() if value is not None else None


def bet_type_to_dict(bet_type: BetType) -> Dict[str, Any]:
    return {
        "id": bet_type.id,
        "name": bet_type.name,
        "description": bet_type.description,
        "created_at": _iso(bet_type.created_at),
    }


def user_bet_to_dict(bet: UserBet) -> Dict[str, Any]:
    return {
        "user_id": bet.user_id,
        "bout_id": bet.bout_id,
        "bet_type_id": bet.bet_type_id,
        "predicted_value": bet.predicted_value,
        "result": bet.result,
        "created_at": _iso(bet.created_at),
        "updated_at": _iso(bet.updated_at),
    }


class BettingService:
    """Bet types, user bets and their settlement."""

    def __init__(self, db: Session):
        self.db = db
        self.bet_types = BetTypeRepository(db)
        self.bets = UserBetRepository(db)
        self.bouts = BoutRepository(db)
        self.results = BoutResultRepository(db)

    # ========================================================================
    # Bet types
    # ========================================================================

    def create_bet_type(self, name: str, description: Optional[str] = None) -> Optional[BetType]:
        """
        Create a bet type.

        Returns:
            The new bet type, or None if the name is taken or the insert failed
        """
        try:
            bet_type = self.bet_types.create(name=name, description=description)
            self.bet_types.save()
            return bet_type
        except IntegrityError:
            self.bet_types.rollback()
            logger.warning(f"Bet type {name!r} already exists")
            return None
        except SQLAlchemyError as e:
            logger.error(f"Error creating bet type {name!r}: {e}")
            self.bet_types.rollback()
            return None

    def get_all_bet_types(self) -> List[BetType]:
        try:
            return self.bet_types.find_all(order_by="id")
        except SQLAlchemyError as e:
            logger.error(f"Error getting bet types: {e}")
            self.bet_types.rollback()
            return []

    def get_bet_type_by_id(self, bet_type_id: int) -> Optional[BetType]:
        try:
            return self.bet_types.find_by_id(bet_type_id)
        except SQLAlchemyError as e:
            logger.error(f"Error getting bet type {bet_type_id}: {e}")
            self.bet_types.rollback()
            return None

    def get_or_create_bet_type(self, name: str) -> Optional[BetType]:
        """
        Find a bet type by name, creating it with a generated description.

        A concurrent insert of the same name is resolved by re-reading.
        """
        try:
            existing = self.bet_types.find_by_name(name)
            if existing is not None:
                return existing

            bet_type = self.bet_types.create(name=name, description=f"Result type: {name}")
            self.bet_types.save()
            logger.info(f"Created bet type {name!r}")
            return bet_type
        except IntegrityError:
            self.bet_types.rollback()
            return self._find_bet_type_by_name(name)
        except SQLAlchemyError as e:
            logger.error(f"Error resolving bet type {name!r}: {e}")
            self.bet_types.rollback()
            return None

    def _find_bet_type_by_name(self, name: str) -> Optional[BetType]:
        try:
            return self.bet_types.find_by_name(name)
        except SQLAlchemyError as e:
            logger.error(f"Error re-reading bet type {name!r}: {e}")
            self.bet_types.rollback()
            return None

    # ========================================================================
    # User bets
    # ========================================================================

    def place_bet(
        self,
        user_id: str,
        bout_id: str,
        bet_type_id: int,
        predicted_value: str,
    ) -> Optional[UserBet]:
        """
        Place or replace a user's prediction for a bout and bet type.

        Raises:
            ValueError: If the bout or bet type does not exist, or the
                predicted fighter is not in the bout

        Returns:
            The stored bet, or None if the store failed
        """
        try:
            bout = self.bouts.find_by_id(bout_id)
            bet_type = self.bet_types.find_by_id(bet_type_id)
        except SQLAlchemyError as e:
            logger.error(f"Error validating bet on bout {bout_id}: {e}")
            self.bouts.rollback()
            return None

        if bout is None:
            raise ValueError(f"Bout {bout_id} not found")
        if bet_type is None:
            raise ValueError(f"Bet type {bet_type_id} not found")
        if predicted_value not in (bout.fighter_left_id, bout.fighter_right_id):
            raise ValueError("predicted_value must be the id of one of the bout's fighters")

        try:
            existing = self.bets.find_by_key(user_id, bout_id, bet_type_id)
            if existing is not None:
                bet = self._replace_prediction(existing, predicted_value)
            else:
                bet = self.bets.create(
                    user_id=user_id,
                    bout_id=bout_id,
                    bet_type_id=bet_type_id,
                    predicted_value=predicted_value,
                )
                self.bets.save()
                metrics.record_bet_placed("inserted")
        except IntegrityError:
            # Same key inserted concurrently: fall back to updating it
            self.bets.rollback()
            bet = self._retry_as_update(user_id, bout_id, bet_type_id, predicted_value)
        except SQLAlchemyError as e:
            logger.error(f"Error placing bet for user {user_id} on bout {bout_id}: {e}")
            self.bets.rollback()
            return None

        if bet is not None:
            # Bets on a bout that already has a result settle immediately
            self.settle_bout(bout_id)
        return bet

    def _replace_prediction(self, bet: UserBet, predicted_value: str) -> UserBet:
        self.bets.update(bet, predicted_value=predicted_value, result=None)
        self.bets.save()
        metrics.record_bet_placed("updated")
        return bet

    def _retry_as_update(
        self,
        user_id: str,
        bout_id: str,
        bet_type_id: int,
        predicted_value: str,
    ) -> Optional[UserBet]:
        try:
            existing = self.bets.find_by_key(user_id, bout_id, bet_type_id)
            if existing is None:
                return None
            return self._replace_prediction(existing, predicted_value)
        except SQLAlchemyError as e:
            logger.error(f"Error updating bet for user {user_id} on bout {bout_id}: {e}")
            self.bets.rollback()
            return None

    def list_bets_for_user(self, user_id: str) -> List[UserBet]:
        try:
            return self.bets.find_by_user(user_id)
        except SQLAlchemyError as e:
            logger.error(f"Error getting bets for user {user_id}: {e}")
            self.bets.rollback()
            return []

    def list_bets_for_bout(self, bout_id: str) -> List[UserBet]:
        try:
            return self.bets.find_by_bout(bout_id)
        except SQLAlchemyError as e:
            logger.error(f"Error getting bets for bout {bout_id}: {e}")
            self.bets.rollback()
            return []

    def record_bet_outcome(
        self,
        user_id: str,
        bout_id: str,
        bet_type_id: int,
        result: str,
    ) -> Optional[UserBet]:
        """Set the result of an existing bet. Returns None if there is no such bet."""
        try:
            bet = self.bets.find_by_key(user_id, bout_id, bet_type_id)
            if bet is None:
                return None
            self.bets.update(bet, result=result)
            self.bets.save()
            return bet
        except SQLAlchemyError as e:
            logger.error(f"Error recording outcome for user {user_id} on bout {bout_id}: {e}")
            self.bets.rollback()
            return None

    def settle_bout(self, bout_id: str) -> int:
        """
        Settle every bet on a bout against its recorded result.

        A bet is won when its predicted fighter is the winner and its bet
        type is the result's bet type; otherwise it is lost. Bouts without a
        result are left untouched.

        Returns:
            Number of bets settled
        """
        try:
            outcome = self.results.find_by_bout(bout_id)
            if outcome is None:
                return 0

            bets = self.bets.find_by_bout(bout_id)
            for bet in bets:
                won = (
                    outcome.winner_id is not None
                    and bet.predicted_value == outcome.winner_id
                    and bet.bet_type_id == outcome.bet_type_id
                )
                self.bets.update(bet, result=WON if won else LOST)
            self.bets.save()
        except SQLAlchemyError as e:
            logger.error(f"Error settling bets for bout {bout_id}: {e}")
            self.bets.rollback()
            return 0

        for bet in bets:
            metrics.record_bet_settled(bet.result)
        if bets:
            logger.info(f"Settled {len(bets)} bet(s) on bout {bout_id}")
        return len(bets)
