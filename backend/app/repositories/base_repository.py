# backend/app/repositories/base_repository.py
"""
Base repository for the Courtside platform.

Repositories own every query against a model. They flush but never commit;
the service layer decides transaction boundaries through
``BaseService.transaction()``. Database errors surface as
``RepositoryException`` so services do not depend on SQLAlchemy error types.
"""

from contextlib import contextmanager
import logging
from typing import Any, Generic, Iterator, List, Optional, Type, TypeVar

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Query, Session

from ..core.exceptions import RepositoryException

T = TypeVar("T")

logger = logging.getLogger(__name__)


class BaseRepository(Generic[T]):
    """
    CRUD shared by every repository.

    Attributes:
        db: SQLAlchemy session, owned by the calling service
        model: Mapped model class
    """

    def __init__(self, db: Session, model: Type[T]):
        self.db = db
        self.model = model
        self.logger = logging.getLogger(f"{__name__}.{model.__name__}")

    @contextmanager
    def _guard(self, action: str, rollback: bool = False) -> Iterator[None]:
        """Translate SQLAlchemy errors raised while ``action`` runs."""
        name = self.model.__name__
        try:
            yield
        except IntegrityError as e:
            self.logger.error(f"Integrity error while trying to {action} {name}: {e}")
            self.db.rollback()
            raise RepositoryException(f"Cannot {action} {name}: constraint violated") from e
        except SQLAlchemyError as e:
            self.logger.error(f"Database error while trying to {action} {name}: {e}")
            if rollback:
                self.db.rollback()
            raise RepositoryException(f"Failed to {action} {name}: {e}") from e

    def get_by_id(self, id: str, load_relationships: bool = True) -> Optional[T]:
        with self._guard("load"):
            query = self.db.query(self.model).filter(self.model.id == id)
            if load_relationships:
                query = self._apply_eager_loading(query)
            return query.first()

    def create(self, **kwargs) -> T:
        """Add a new entity and flush to obtain its id. Does NOT commit."""
        with self._guard("create", rollback=True):
            entity = self.model(**kwargs)
            self.db.add(entity)
            self.db.flush()
            return entity

    def update_entity(self, entity: T, **kwargs) -> T:
        """Set the given attributes and flush; unknown keys are ignored."""
        with self._guard("update", rollback=True):
            for key, value in kwargs.items():
                if hasattr(entity, key):
                    setattr(entity, key, value)
            self.db.flush()
            return entity

    def delete(self, id: str) -> bool:
        """Hard delete; False when missing. Rows still referenced raise RepositoryException."""
        entity = self.get_by_id(id, load_relationships=False)
        if entity is None:
            return False
        with self._guard("delete", rollback=True):
            self.db.delete(entity)
            self.db.flush()
        return True

    def exists(self, **kwargs) -> bool:
        return self.find_one_by(**kwargs) is not None

    def find_by(self, **kwargs) -> List[T]:
        return self._execute_query(self.db.query(self.model).filter_by(**kwargs))

    def find_one_by(self, **kwargs) -> Optional[T]:
        with self._guard("find"):
            return self.db.query(self.model).filter_by(**kwargs).first()

    # Protected helpers for subclasses

    def _apply_eager_loading(self, query: Query) -> Query:
        """Override to joinedload/selectinload relationships."""
        return query

    def _execute_query(self, query: Query) -> List[T]:
        with self._guard("query"):
            return query.all()

    def _execute_scalar(self, query: Query) -> Any:
        with self._guard("aggregate"):
            return query.scalar()
