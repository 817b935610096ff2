"""
Event routes: schedule CRUD and per-event results.

Writes require the X-API-Key header; reads are public.
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Response, status
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from app.core.auth import get_api_key
from app.core.database import get_db
from app.services.event_service import (
    EventService,
    ScheduledBout,
    bout_to_dict,
    event_to_dict,
    result_view,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/events", tags=["events"])


class BoutCreate(BaseModel):
    """A scheduled bout; records are "W-L-D" strings."""
    left_fighter: str = Field(..., min_length=1)
    left_record: str = ""
    right_fighter: str = Field(..., min_length=1)
    right_record: str = ""


class EventCreate(BaseModel):
    name: str = Field(..., min_length=1)
    date: str = Field(..., min_length=1, description="Event date as published, e.g. 'June 07, 2025'")
    location: str = Field(..., min_length=1)
    bouts: List[BoutCreate]


class EventUpdate(BaseModel):
    name: Optional[str] = None
    date: Optional[str] = None
    location: Optional[str] = None


@router.post("", status_code=status.HTTP_201_CREATED, dependencies=[Depends(get_api_key)])
async def create_event(payload: EventCreate, db: Session = Depends(get_db)):
    """Create an event and its bouts, registering or updating every fighter."""
    service = EventService(db)
    event = await service.create_event(
        name=payload.name,
        date=payload.date,
        location=payload.location,
        bouts=[
            ScheduledBout(
                left_fighter=bout.left_fighter,
                left_record=bout.left_record,
                right_fighter=bout.right_fighter,
                right_record=bout.right_record,
            )
            for bout in payload.bouts
        ],
    )
    if event is None:
        raise HTTPException(status_code=500, detail="Failed to create event")

    data = event_to_dict(event)
    data["bouts"] = [bout_to_dict(bout) for bout in event.bouts]
    return data


@router.get("")
async def list_events(db: Session = Depends(get_db)):
    """All events, most recent first."""
    return [event_to_dict(event) for event in EventService(db).get_all_events()]


@router.get("/{event_id}")
async def get_event(event_id: str, db: Session = Depends(get_db)):
    """
    Get an event with its bouts.

    Each bout carries both fighters' names and current records; bouts of
    past events also carry their recorded result.
    """
    event = EventService(db).get_event_by_id(event_id)
    if event is None:
        raise HTTPException(status_code=404, detail="Event not found")
    return event


@router.put("/{event_id}", dependencies=[Depends(get_api_key)])
async def update_event(event_id: str, payload: EventUpdate, db: Session = Depends(get_db)):
    event = EventService(db).update_event(event_id, payload.model_dump(exclude_unset=True))
    if event is None:
        raise HTTPException(status_code=404, detail="Event not found or update failed")
    return event_to_dict(event)


@router.delete("/{event_id}", status_code=status.HTTP_204_NO_CONTENT, dependencies=[Depends(get_api_key)])
async def delete_event(event_id: str, db: Session = Depends(get_db)):
    if not EventService(db).delete_event(event_id):
        raise HTTPException(status_code=404, detail="Event not found or delete failed")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{event_id}/results")
async def get_event_results(event_id: str, db: Session = Depends(get_db)):
    """Recorded bout results of an event."""
    results = EventService(db).get_bout_results_for_event(event_id)
    return [
        {"bout_id": result.bout_id, **result_view(result)}
        for result in results
    ]
