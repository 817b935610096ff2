"""
Results ingestion route.

Accepts the scraped results of an event and reconciles them into fighters,
bouts, bout results and bet settlements. Individual bouts that fail are
reported per item without failing the request.
"""
import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from app.core.auth import get_api_key
from app.core.database import get_db
from app.services.results_ingestion_service import BoutOutcome, ResultsIngestionService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/event-results", tags=["event-results"])


class BoutResultIn(BaseModel):
    winner: str = Field(..., min_length=1)
    loser: str = Field(..., min_length=1)
    result: str = Field("", description="Method of victory, e.g. 'KO/TKO, 0:51 R2'")


class EventResultsIn(BaseModel):
    name: str = Field(..., min_length=1)
    date: str = Field(..., min_length=1)
    location: str = Field(..., min_length=1)
    bout_results: List[BoutResultIn]


@router.post("", dependencies=[Depends(get_api_key)])
async def add_event_results(payload: EventResultsIn, db: Session = Depends(get_db)):
    report = await ResultsIngestionService(db).add_results(
        name=payload.name,
        date=payload.date,
        location=payload.location,
        bout_results=[
            BoutOutcome(winner=b.winner, loser=b.loser, result=b.result)
            for b in payload.bout_results
        ],
    )
    if report is None:
        raise HTTPException(status_code=500, detail="Failed to add event results")
    return report.to_dict()
