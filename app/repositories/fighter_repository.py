"""
Fighter Repository for fighter data access.

Usage:
    repo = FighterRepository(db)
    fighter = repo.find_by_name("Alex Pereira")
    matches = repo.search_by_name("pere")
"""
from typing import Optional, List

from app.models import Fighter
from app.repositories.base import BaseRepository


class FighterRepository(BaseRepository[Fighter]):
    """Repository for fighter data access."""

    def __init__(self, db):
        super().__init__(Fighter, db)

    def find_by_name(self, name: str) -> Optional[Fighter]:
        """Find a fighter by exact (case-sensitive) name match."""
        return self.where_first(Fighter.name == name)

    def search_by_name(self, term: str, limit: Optional[int] = None) -> List[Fighter]:
        """
        Search for fighters by name (case-insensitive partial match).

        Args:
            term: Name or partial name to search for
            limit: Maximum number of results

        Returns:
            Matching fighters ordered by name
        """
        pattern = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
        query = self.db.query(Fighter).filter(
            Fighter.name.ilike(f"%{pattern}%", escape="\\")
        ).order_by(Fighter.name)
        if limit is not None:
            query = query.limit(limit)
        return query.all()

    def find_all_ordered(self) -> List[Fighter]:
        """All fighters ordered by name."""
        return self.find_all(order_by="name")
