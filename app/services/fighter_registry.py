"""Fighter registry: upsert-by-name resolution of fighter identities.

Fighters are deduplicated by exact name. Schedules carry a record string for
each fighter ("19-4-1"), which replaces the stored tally whenever it is
supplied. Results feeds carry names only; those lookups resolve identity
without touching the tally.

Pipeline for ``resolve(name, record)``:
1. Exact lookup by name
2. Found: overwrite the tally from ``record`` (skipped when record is None)
3. Not found: insert with the parsed tally
4. Insert lost a race on the unique name: roll back and re-read the winner
"""
import logging
from typing import List, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.core import metrics
from app.models import Fighter
from app.repositories import FighterRepository
from app.services.record_parser import FighterTally, parse_record

logger = logging.getLogger(__name__)


class FighterRegistry:
    """Resolve fighter names to stored Fighter rows."""

    def __init__(self, db: Session):
        self.db = db
        self.fighters = FighterRepository(db)

    async def resolve(self, name: str, record: Optional[str] = None) -> Optional[Fighter]:
        """
        Resolve a fighter by name, creating or updating it as needed.

        Args:
            name: Fighter name (exact, case-sensitive dedup key)
            record: "W-L-D" record string. A string (even "") replaces the
                stored tally; None resolves identity only and leaves an
                existing tally untouched.

        Returns:
            The stored fighter, or None if the store failed on lookup/insert
        """
        try:
            existing = self.fighters.find_by_name(name)
        except SQLAlchemyError as e:
            logger.error(f"Error searching for fighter {name!r}: {e}")
            self.fighters.rollback()
            metrics.record_fighter_resolution("failed")
            return None

        if existing is not None:
            if record is None:
                metrics.record_fighter_resolution("reused")
                return existing
            return self._overwrite_tally(existing, parse_record(record))

        return self._create(name, record)

    def _create(self, name: str, record: Optional[str]) -> Optional[Fighter]:
        tally = parse_record(record)
        try:
            fighter = self.fighters.create(
                name=name,
                wins=tally.wins,
                losses=tally.losses,
                draws=tally.draws,
            )
            self.fighters.save()
        except IntegrityError:
            # Another request inserted the same name between our lookup and insert
            self.fighters.rollback()
            logger.info(f"Fighter {name!r} was created concurrently; re-reading")
            return self._reread_after_race(name, record, tally)
        except SQLAlchemyError as e:
            logger.error(f"Error creating fighter {name!r}: {e}")
            self.fighters.rollback()
            metrics.record_fighter_resolution("failed")
            return None

        metrics.record_fighter_resolution("created")
        logger.debug(f"Created fighter {name!r} ({tally.as_record()})")
        return fighter

    def _reread_after_race(
        self,
        name: str,
        record: Optional[str],
        tally: FighterTally,
    ) -> Optional[Fighter]:
        try:
            existing = self.fighters.find_by_name(name)
        except SQLAlchemyError as e:
            logger.error(f"Error re-reading fighter {name!r}: {e}")
            self.fighters.rollback()
            existing = None

        if existing is None:
            metrics.record_fighter_resolution("failed")
            return None
        if record is None:
            metrics.record_fighter_resolution("reused")
            return existing
        return self._overwrite_tally(existing, tally)

    def _overwrite_tally(self, fighter: Fighter, tally: FighterTally) -> Fighter:
        """Replace the stored tally. On failure the pre-update fighter is returned."""
        try:
            self.fighters.update(fighter, wins=tally.wins, losses=tally.losses, draws=tally.draws)
            self.fighters.save()
        except SQLAlchemyError as e:
            logger.error(f"Error updating fighter {fighter.id}: {e}")
            # Rollback expires the instance, so it reloads with the stored tally
            self.fighters.rollback()
            metrics.record_fighter_resolution("update_failed")
            return fighter

        metrics.record_fighter_resolution("updated")
        return fighter

    # ========================================================================
    # Reads
    # ========================================================================

    def get_fighter(self, fighter_id: str) -> Optional[Fighter]:
        try:
            return self.fighters.find_by_id(fighter_id)
        except SQLAlchemyError as e:
            logger.error(f"Error getting fighter {fighter_id}: {e}")
            self.fighters.rollback()
            return None

    def list_fighters(self) -> List[Fighter]:
        try:
            return self.fighters.find_all_ordered()
        except SQLAlchemyError as e:
            logger.error(f"Error getting fighters: {e}")
            self.fighters.rollback()
            return []

    def search_fighters(self, term: str) -> List[Fighter]:
        """Case-insensitive substring search on names, ordered by name."""
        try:
            return self.fighters.search_by_name(term)
        except SQLAlchemyError as e:
            logger.error(f"Error searching fighters for {term!r}: {e}")
            self.fighters.rollback()
            return []
