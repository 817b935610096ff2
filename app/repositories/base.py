"""
Base repository class for data access layer.

The repository pattern provides:
1. Separation of data access logic from business logic
2. Single place for query logic (easier to maintain)
3. Easier testing (repositories can be swapped or patched)
4. Consistent interface for data operations

Repositories never commit on their own; services decide when a unit of work
is written (see ``save``/``rollback``).

Example:
    class FighterRepository(BaseRepository[Fighter]):
        def find_by_name(self, name: str) -> Optional[Fighter]:
            return self.where_first(Fighter.name == name)
"""
from abc import ABC
from typing import TypeVar, Generic, Type, Optional, List, Any
from sqlalchemy import desc, func
from sqlalchemy.orm import Query, Session

from app.utils.timezone import utc_now

T = TypeVar("T")


class BaseRepository(Generic[T], ABC):
    """
    Base repository class providing common data access methods.

    Attributes:
        model_type: The SQLAlchemy model class this repository manages
        db: The database session
    """

    def __init__(self, model_type: Type[T], db: Session):
        self.model_type = model_type
        self.db = db

    # ========================================================================
    # CRUD Operations
    # ========================================================================

    def find_by_id(self, id: Any) -> Optional[T]:
        """Find a single record by primary key."""
        return self.db.get(self.model_type, id)

    def find_all(
        self,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
        order_by: Optional[str] = None
    ) -> List[T]:
        """
        Find all records with optional pagination.

        Args:
            limit: Maximum number of records to return
            offset: Number of records to skip
            order_by: Column name to order by (prefix with '-' for descending)
        """
        query = self.db.query(self.model_type)

        if order_by:
            if order_by.startswith('-'):
                query = query.order_by(desc(getattr(self.model_type, order_by[1:])))
            else:
                query = query.order_by(getattr(self.model_type, order_by))

        if offset is not None:
            query = query.offset(offset)

        if limit is not None:
            query = query.limit(limit)

        return query.all()

    def create(self, **kwargs) -> T:
        """Create a new record (added to the session, not yet committed)."""
        instance = self.model_type(**kwargs)
        self.db.add(instance)
        return instance

    def create_many(self, items: List[dict]) -> List[T]:
        """Create multiple records (added to the session, not yet committed)."""
        instances = [self.model_type(**item) for item in items]
        self.db.add_all(instances)
        return instances

    def update(self, instance: T, **kwargs) -> T:
        """Apply field changes to a loaded record and touch ``updated_at``."""
        for key, value in kwargs.items():
            if hasattr(instance, key):
                setattr(instance, key, value)
        if hasattr(instance, "updated_at"):
            instance.updated_at = utc_now()
        return instance

    def delete(self, instance: T) -> None:
        """Mark a record for deletion."""
        self.db.delete(instance)

    # ========================================================================
    # Query Builders
    # ========================================================================

    def query(self) -> Query:
        """Get a new query object for this model."""
        return self.db.query(self.model_type)

    def filter_by_first(self, **kwargs) -> Optional[T]:
        """Filter records by keyword arguments and return first match."""
        return self.db.query(self.model_type).filter_by(**kwargs).first()

    def where(self, *criterion) -> List[T]:
        """Filter records using SQLAlchemy expressions."""
        return self.db.query(self.model_type).filter(*criterion).all()

    def where_first(self, *criterion) -> Optional[T]:
        """Filter records using SQLAlchemy expressions and return first match."""
        return self.db.query(self.model_type).filter(*criterion).first()

    def exists_where(self, *criterion) -> bool:
        """Check if any record matching the criterion exists."""
        return self.db.query(
            self.db.query(self.model_type).filter(*criterion).exists()
        ).scalar()

    def count(self, *criterion) -> int:
        """Count records matching optional criterion."""
        query = self.db.query(func.count()).select_from(self.model_type)
        if criterion:
            query = query.filter(*criterion)
        return query.scalar() or 0

    # ========================================================================
    # Save Operations
    # ========================================================================

    def save(self) -> None:
        """Commit pending changes to the database."""
        self.db.commit()

    def flush(self) -> None:
        """Flush pending changes without committing."""
        self.db.flush()

    def refresh(self, instance: T) -> T:
        """Refresh an instance from the database."""
        self.db.refresh(instance)
        return instance

    def rollback(self) -> None:
        """Rollback pending changes."""
        self.db.rollback()
