"""
Bet type routes.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from app.core.auth import get_api_key
from app.core.database import get_db
from app.services.betting_service import BettingService, bet_type_to_dict

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/bet-types", tags=["bet-types"])


class BetTypeCreate(BaseModel):
    name: str = Field(..., min_length=1, description="Bet type name (KO/TKO, Split Decision, ...)")
    description: Optional[str] = None


@router.post("", status_code=status.HTTP_201_CREATED, dependencies=[Depends(get_api_key)])
async def create_bet_type(payload: BetTypeCreate, db: Session = Depends(get_db)):
    bet_type = BettingService(db).create_bet_type(payload.name, payload.description)
    if bet_type is None:
        raise HTTPException(status_code=400, detail=f"Failed to create bet type {payload.name!r}")
    return bet_type_to_dict(bet_type)


@router.get("")
async def list_bet_types(db: Session = Depends(get_db)):
    return [bet_type_to_dict(b) for b in BettingService(db).get_all_bet_types()]


@router.get("/{bet_type_id}")
async def get_bet_type(bet_type_id: int, db: Session = Depends(get_db)):
    bet_type = BettingService(db).get_bet_type_by_id(bet_type_id)
    if bet_type is None:
        raise HTTPException(status_code=404, detail="Bet type not found")
    return bet_type_to_dict(bet_type)
