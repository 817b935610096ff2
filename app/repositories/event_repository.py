"""
Event and Bout repositories.

Usage:
    events = EventRepository(db)
    event = events.find_by_name("UFC 316")

    bouts = BoutRepository(db)
    card = bouts.find_by_event(event.id)
"""
from typing import Optional, List

from sqlalchemy import or_, and_
from sqlalchemy.orm import joinedload

from app.models import Event, Bout
from app.repositories.base import BaseRepository


class EventRepository(BaseRepository[Event]):
    """Repository for event data access."""

    def __init__(self, db):
        super().__init__(Event, db)

    def find_by_name(self, name: str) -> Optional[Event]:
        """Find an event by exact name match."""
        return self.where_first(Event.name == name)

    def find_all_latest_first(self) -> List[Event]:
        """
        All events, most recent first.

        Ordered by the parsed calendar date (unparsable dates last), with the
        free-text date as a tie-breaker.
        """
        return self.db.query(Event).order_by(
            Event.event_date.desc().nulls_last(),
            Event.date.desc(),
        ).all()


class BoutRepository(BaseRepository[Bout]):
    """Repository for bout data access."""

    def __init__(self, db):
        super().__init__(Bout, db)

    def find_by_event(self, event_id: str) -> List[Bout]:
        """Bouts of an event with both fighters loaded, in card order."""
        return self.db.query(Bout).options(
            joinedload(Bout.fighter_left),
            joinedload(Bout.fighter_right),
        ).filter(
            Bout.event_id == event_id
        ).order_by(Bout.created_at, Bout.id).all()

    def find_between(
        self,
        event_id: str,
        fighter_a_id: str,
        fighter_b_id: str,
    ) -> Optional[Bout]:
        """Find the bout of an event between two fighters, in either slot order."""
        return self.where_first(
            Bout.event_id == event_id,
            or_(
                and_(Bout.fighter_left_id == fighter_a_id, Bout.fighter_right_id == fighter_b_id),
                and_(Bout.fighter_left_id == fighter_b_id, Bout.fighter_right_id == fighter_a_id),
            ),
        )

    def delete_by_event(self, event_id: str) -> int:
        """Delete all bouts of an event. Returns the number of rows removed."""
        return self.db.query(Bout).filter(
            Bout.event_id == event_id
        ).delete(synchronize_session="fetch")
