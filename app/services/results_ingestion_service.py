"""
Results ingestion: reconcile a feed of bout outcomes into the store.

For an event identified by name, each ``{winner, loser, result}`` item is
processed independently:

1. Resolve both fighters by name (identity only, tallies untouched)
2. Find the bout between them in the event, or create it winner-left
3. Classify the result text into a bet type, round and time
4. Get or create the bet type
5. Record the bout result (one per bout)
6. Settle the bout's user bets

A failing item is reported and skipped; it never aborts the batch.
"""
import asyncio
import logging
from dataclasses import dataclass, field, asdict
from typing import Any, Dict, List, Optional, Sequence

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.core import metrics
from app.repositories import BoutRepository, BoutResultRepository, EventRepository
from app.services.betting_service import BettingService
from app.services.event_service import EventService
from app.services.fighter_registry import FighterRegistry
from app.services.result_classifier import classify_result

logger = logging.getLogger(__name__)

RECORDED = "recorded"
FAILED = "failed"

_LOSER_MARK = "\nL"


@dataclass(frozen=True)
class BoutOutcome:
    """One line of a results feed."""
    winner: str
    loser: str
    result: str = ""


@dataclass
class IngestionItem:
    winner: str
    loser: str
    status: str
    bout_id: Optional[str] = None
    reason: Optional[str] = None


@dataclass
class IngestionReport:
    """Outcome of a results ingestion, one item per feed line."""
    event_id: str
    event_created: bool
    items: List[IngestionItem] = field(default_factory=list)

    @property
    def recorded(self) -> int:
        return sum(1 for item in self.items if item.status == RECORDED)

    @property
    def failed(self) -> int:
        return sum(1 for item in self.items if item.status == FAILED)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": True,
            "event_id": self.event_id,
            "event_created": self.event_created,
            "recorded": self.recorded,
            "failed": self.failed,
            "results": [asdict(item) for item in self.items],
        }


def clean_loser_name(name: str) -> str:
    """Trim a loser name and drop the trailing "\\nL" marker some feeds append."""
    name = name.strip()
    if name.endswith(_LOSER_MARK):
        name = name[: -len(_LOSER_MARK)].strip()
    return name


class ResultsIngestionService:
    """Apply a results feed for one event."""

    def __init__(self, db: Session):
        self.db = db
        self.events = EventRepository(db)
        self.bouts = BoutRepository(db)
        self.results = BoutResultRepository(db)
        self.registry = FighterRegistry(db)
        self.event_service = EventService(db)
        self.betting = BettingService(db)

    async def add_results(
        self,
        name: str,
        date: str,
        location: str,
        bout_results: Sequence[BoutOutcome],
    ) -> Optional[IngestionReport]:
        """
        Ingest results for the event named ``name``, creating it if needed.

        Returns:
            IngestionReport, or None if the event could not be found or created
        """
        try:
            event = self.events.find_by_name(name)
        except SQLAlchemyError as e:
            logger.error(f"Error checking for existing event {name!r}: {e}")
            self.events.rollback()
            return None

        event_created = False
        if event is None:
            event = await self.event_service.create_event(name, date, location)
            if event is None:
                logger.error(f"Failed to create event {name!r} for results")
                return None
            event_created = True

        report = IngestionReport(event_id=event.id, event_created=event_created)
        for outcome in bout_results:
            item = await self._ingest_one(event.id, outcome)
            metrics.record_bout_result_ingested(item.status)
            report.items.append(item)

        logger.info(
            f"Ingested results for {name!r}: {report.recorded} recorded, {report.failed} failed",
            extra={"event_id": event.id},
        )
        return report

    async def _ingest_one(self, event_id: str, outcome: BoutOutcome) -> IngestionItem:
        winner_name = outcome.winner.strip()
        loser_name = clean_loser_name(outcome.loser)
        item = IngestionItem(winner=winner_name, loser=loser_name, status=FAILED)

        winner, loser = await asyncio.gather(
            self.registry.resolve(winner_name),
            self.registry.resolve(loser_name),
        )
        if winner is None or loser is None:
            item.reason = "failed to resolve fighters"
            logger.error(f"Failed to resolve fighters {winner_name!r} / {loser_name!r}")
            return item

        try:
            bout = self.bouts.find_between(event_id, winner.id, loser.id)
            if bout is None:
                bout = self.bouts.create(
                    event_id=event_id,
                    fighter_left_id=winner.id,
                    fighter_right_id=loser.id,
                )
                self.bouts.save()
        except SQLAlchemyError as e:
            logger.error(f"Error finding or creating bout {winner_name!r} vs {loser_name!r}: {e}")
            self.bouts.rollback()
            item.reason = "failed to find or create bout"
            return item

        item.bout_id = bout.id
        classification = classify_result(outcome.result)

        bet_type = self.betting.get_or_create_bet_type(classification.bet_type)
        if bet_type is None:
            item.reason = f"failed to resolve bet type {classification.bet_type!r}"
            return item

        reason = self._record_result(
            bout_id=bout.id,
            winner_id=winner.id,
            bet_type_id=bet_type.id,
            round=classification.round,
            time=classification.time,
            details=outcome.result,
        )
        if reason is not None:
            item.reason = reason
            return item

        self.betting.settle_bout(bout.id)
        item.status = RECORDED
        return item

    def _record_result(self, bout_id: str, **fields) -> Optional[str]:
        """Insert the bout result. Returns a failure reason, or None on success."""
        try:
            if self.results.find_by_bout(bout_id) is not None:
                logger.warning(f"Bout {bout_id} already has a result")
                return "result already recorded"

            self.results.create(bout_id=bout_id, **fields)
            self.results.save()
        except IntegrityError:
            self.results.rollback()
            logger.warning(f"Bout {bout_id} already has a result")
            return "result already recorded"
        except SQLAlchemyError as e:
            logger.error(f"Error creating result for bout {bout_id}: {e}")
            self.results.rollback()
            return "failed to record result"
        return None
