"""
User bet routes: placing predictions, listing them, recording outcomes.

Placing a bet requires a signed-in user; the bet is recorded for the user
the bearer token belongs to.
"""
import logging
from typing import Literal

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from app.core.auth import get_api_key, get_current_user_id
from app.core.database import get_db
from app.services.betting_service import BettingService, user_bet_to_dict

logger = logging.getLogger(__name__)

router = APIRouter(tags=["user-bets"])


class UserBetCreate(BaseModel):
    bout_id: str = Field(..., min_length=1)
    bet_type_id: int
    predicted_value: str = Field(..., min_length=1, description="Id of the fighter picked to win")


class BetResultUpdate(BaseModel):
    user_id: str = Field(..., min_length=1)
    bout_id: str = Field(..., min_length=1)
    bet_type_id: int
    result: Literal["won", "lost"]


@router.post("/user-bets", status_code=status.HTTP_201_CREATED)
async def place_bet(
    payload: UserBetCreate,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """Place or replace the caller's prediction for a bout and bet type."""
    try:
        bet = BettingService(db).place_bet(
            user_id=user_id,
            bout_id=payload.bout_id,
            bet_type_id=payload.bet_type_id,
            predicted_value=payload.predicted_value,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    if bet is None:
        raise HTTPException(status_code=500, detail="Failed to place bet")
    return user_bet_to_dict(bet)


@router.get("/user-bets/{user_id}")
async def get_user_bets(user_id: str, db: Session = Depends(get_db)):
    return [user_bet_to_dict(b) for b in BettingService(db).list_bets_for_user(user_id)]


@router.get("/bout-bets/{bout_id}")
async def get_bout_bets(bout_id: str, db: Session = Depends(get_db)):
    return [user_bet_to_dict(b) for b in BettingService(db).list_bets_for_bout(bout_id)]


@router.put("/user-bets/result", dependencies=[Depends(get_api_key)])
async def update_bet_result(payload: BetResultUpdate, db: Session = Depends(get_db)):
    """Manually set a bet's outcome ("won" or "lost")."""
    bet = BettingService(db).record_bet_outcome(
        user_id=payload.user_id,
        bout_id=payload.bout_id,
        bet_type_id=payload.bet_type_id,
        result=payload.result,
    )
    if bet is None:
        raise HTTPException(status_code=404, detail="Bet not found or update failed")
    return user_bet_to_dict(bet)
