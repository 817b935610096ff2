"""
Service for MMA event operations.

Events own their bouts; each bout links two fighters resolved through the
FighterRegistry. Reading an event returns a display-ready view: both
fighters' names and current records per bout, and the recorded results once
the event date has passed.
"""
import asyncio
import logging
from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, List, Optional, Sequence, Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.models import Event, Bout, BoutResult, Fighter
from app.repositories import EventRepository, BoutRepository, BoutResultRepository
from app.services.fighter_registry import FighterRegistry
from app.utils.timezone import is_concluded, parse_event_date

logger = logging.getLogger(__name__)

UNKNOWN = "Unknown"
EMPTY_RECORD = "0-0-0"
UPDATABLE_EVENT_FIELDS = ("name", "date", "location")


@dataclass(frozen=True)
class ScheduledBout:
    """A bout as listed on an event schedule."""
    left_fighter: str
    left_record: str
    right_fighter: str
    right_record: str


def _iso(value) -> Optional[str]:
    return value.isoformat() if value is not None else None


def event_to_dict(event: Event) -> Dict[str, Any]:
    return {
        "id": event.id,
        "name": event.name,
        "date": event.date,
        "event_date": _iso(event.event_date),
        "location": event.location,
        "created_at": _iso(event.created_at),
        "updated_at": _iso(event.updated_at),
    }


def bout_to_dict(bout: Bout) -> Dict[str, Any]:
    return {
        "id": bout.id,
        "event_id": bout.event_id,
        "fighter_left_id": bout.fighter_left_id,
        "fighter_right_id": bout.fighter_right_id,
        "created_at": _iso(bout.created_at),
        "updated_at": _iso(bout.updated_at),
    }


def fighter_to_dict(fighter: Fighter) -> Dict[str, Any]:
    return {
        "id": fighter.id,
        "name": fighter.name,
        "wins": fighter.wins,
        "losses": fighter.losses,
        "draws": fighter.draws,
        "record": fighter.record,
        "created_at": _iso(fighter.created_at),
        "updated_at": _iso(fighter.updated_at),
    }


def bout_view(bout: Bout) -> Dict[str, Any]:
    """Bout with both fighters' names and current records."""
    left, right = bout.fighter_left, bout.fighter_right
    view = bout_to_dict(bout)
    view.update({
        "left_fighter": left.name if left else UNKNOWN,
        "right_fighter": right.name if right else UNKNOWN,
        "left_record": left.record if left else EMPTY_RECORD,
        "right_record": right.record if right else EMPTY_RECORD,
    })
    return view


def result_view(result: BoutResult) -> Dict[str, Any]:
    return {
        "winner_id": result.winner_id,
        "winner_name": result.winner.name if result.winner else UNKNOWN,
        "bet_type": result.bet_type.name if result.bet_type else UNKNOWN,
        "round": result.round,
        "time": result.time,
        "details": result.details,
    }


class EventService:
    """CRUD over events and their bouts."""

    def __init__(self, db: Session):
        self.db = db
        self.events = EventRepository(db)
        self.bouts = BoutRepository(db)
        self.results = BoutResultRepository(db)
        self.registry = FighterRegistry(db)

    async def create_event(
        self,
        name: str,
        date: str,
        location: str,
        bouts: Sequence[ScheduledBout] = (),
    ) -> Optional[Event]:
        """
        Create an event and its bouts.

        Both fighters of every bout are resolved (tallies updated from the
        supplied records). Bouts whose fighters could not be resolved are
        dropped. The event is kept even when inserting its bouts fails.

        Returns:
            The created event, or None if the event row could not be stored
        """
        try:
            event = self.events.create(
                name=name,
                date=date,
                event_date=parse_event_date(date),
                location=location,
            )
            self.events.save()
        except SQLAlchemyError as e:
            logger.error(f"Error creating event {name!r}: {e}")
            self.events.rollback()
            return None

        if bouts:
            pairs = await asyncio.gather(*(self._resolve_pair(bout) for bout in bouts))
            rows = [
                {"event_id": event.id, "fighter_left_id": left.id, "fighter_right_id": right.id}
                for left, right in pairs
                if left is not None and right is not None
            ]
            if len(rows) < len(bouts):
                logger.warning(f"Dropped {len(bouts) - len(rows)} bout(s) of {name!r} with unresolved fighters")

            if rows:
                try:
                    self.bouts.create_many(rows)
                    self.bouts.save()
                except SQLAlchemyError as e:
                    logger.error(f"Error creating bouts for event {event.id}: {e}")
                    self.bouts.rollback()

        logger.info(f"Created event {event.id} ({name!r}) with {len(event.bouts)} bout(s)")
        return event

    async def _resolve_pair(self, bout: ScheduledBout) -> Tuple[Optional[Fighter], Optional[Fighter]]:
        left, right = await asyncio.gather(
            self.registry.resolve(bout.left_fighter, bout.left_record),
            self.registry.resolve(bout.right_fighter, bout.right_record),
        )
        if left is None or right is None:
            logger.error(f"Failed to resolve fighters for bout {bout.left_fighter!r} vs {bout.right_fighter!r}")
        return left, right

    def get_all_events(self) -> List[Event]:
        """All events, most recent first."""
        try:
            return self.events.find_all_latest_first()
        except SQLAlchemyError as e:
            logger.error(f"Error getting events: {e}")
            self.events.rollback()
            return []

    def get_event_by_id(self, event_id: str, today: Optional[date] = None) -> Optional[Dict[str, Any]]:
        """
        Event view with its bouts.

        When the event date is before ``today`` (default: the current date),
        each bout with a recorded result gets a ``result`` block.

        Returns:
            The event view, or None if the event does not exist
        """
        try:
            event = self.events.find_by_id(event_id)
        except SQLAlchemyError as e:
            logger.error(f"Error getting event {event_id}: {e}")
            self.events.rollback()
            return None

        if event is None:
            return None

        try:
            bouts = self.bouts.find_by_event(event_id)
        except SQLAlchemyError as e:
            logger.error(f"Error getting bouts for event {event_id}: {e}")
            self.bouts.rollback()
            bouts = []

        view = event_to_dict(event)
        view["bouts"] = [bout_view(bout) for bout in bouts]

        if is_concluded(event.event_date, today):
            results = {result.bout_id: result for result in self.get_bout_results_for_event(event_id)}
            for bout in view["bouts"]:
                result = results.get(bout["id"])
                if result is not None:
                    bout["result"] = result_view(result)

        return view

    def get_bout_results_for_event(self, event_id: str) -> List[BoutResult]:
        try:
            return self.results.find_by_event(event_id)
        except SQLAlchemyError as e:
            logger.error(f"Error getting bout results for event {event_id}: {e}")
            self.results.rollback()
            return []

    def update_event(self, event_id: str, changes: Dict[str, Any]) -> Optional[Event]:
        """
        Merge name/date/location changes into an event.

        Returns:
            The updated event, or None if it does not exist or the update failed
        """
        try:
            event = self.events.find_by_id(event_id)
            if event is None:
                return None

            fields = {
                key: changes[key]
                for key in UPDATABLE_EVENT_FIELDS
                if changes.get(key) is not None
            }
            if "date" in fields:
                fields["event_date"] = parse_event_date(fields["date"])

            self.events.update(event, **fields)
            self.events.save()
            return event
        except SQLAlchemyError as e:
            logger.error(f"Error updating event {event_id}: {e}")
            self.events.rollback()
            return None

    def delete_event(self, event_id: str) -> bool:
        """
        Delete an event and its bouts. Fighters are kept.

        Returns:
            False if the event does not exist or either delete failed
        """
        try:
            event = self.events.find_by_id(event_id)
        except SQLAlchemyError as e:
            logger.error(f"Error getting event {event_id}: {e}")
            self.events.rollback()
            return False

        if event is None:
            return False

        try:
            removed = self.bouts.delete_by_event(event_id)
            self.bouts.save()
        except SQLAlchemyError as e:
            logger.error(f"Error deleting bouts of event {event_id}: {e}")
            self.bouts.rollback()
            return False

        try:
            self.events.delete(event)
            self.events.save()
        except SQLAlchemyError as e:
            logger.error(f"Error deleting event {event_id}: {e}")
            self.events.rollback()
            return False

        logger.info(f"Deleted event {event_id} and {removed} bout(s)")
        return True
