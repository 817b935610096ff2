"""
Fighter lookup routes.
"""
import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.services.event_service import fighter_to_dict
from app.services.fighter_registry import FighterRegistry

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/fighters", tags=["fighters"])


@router.get("")
async def list_fighters(db: Session = Depends(get_db)):
    return [fighter_to_dict(f) for f in FighterRegistry(db).list_fighters()]


@router.get("/search")
async def search_fighters(
    name: str = Query(..., min_length=1, description="Fighter name to search for"),
    db: Session = Depends(get_db)
):
    """
    Search for fighters by name.

    The search is case-insensitive and matches partial names.
    Example: /api/fighters/search?name=pena
    """
    fighters = FighterRegistry(db).search_fighters(name)
    return {
        "fighters": [fighter_to_dict(f) for f in fighters],
        "count": len(fighters),
    }


@router.get("/{fighter_id}")
async def get_fighter(fighter_id: str, db: Session = Depends(get_db)):
    fighter = FighterRegistry(db).get_fighter(fighter_id)
    if fighter is None:
        raise HTTPException(status_code=404, detail=f"Fighter {fighter_id} not found")
    return fighter_to_dict(fighter)
