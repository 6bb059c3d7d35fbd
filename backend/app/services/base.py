# backend/app/services/base.py
"""
Base service for the Courtside platform.

Every service derives from ``BaseService`` and gets:
- Transaction management (commit, rollback, DB errors as ServiceException)
- A per-class logger
- Operation timing with slow-operation warnings and Prometheus metrics
"""

import asyncio
from contextlib import contextmanager
from functools import wraps
import logging
import time
from typing import Any, Callable, Optional, TypeVar, cast

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.exceptions import RepositoryException, ServiceException
from ..monitoring.prometheus_metrics import prometheus_metrics

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])

SLOW_OPERATION_SECONDS = 1.0


class BaseService:
    """
    Base class for all service layer components.

    Subclasses hold business rules and talk to the database only through
    repositories; multi-step writes run inside ``transaction()``.
    """

    def __init__(self, db: Session):
        self.db = db
        self.logger = logging.getLogger(self.__class__.__name__)

    @contextmanager
    def transaction(self):
        """
        Context manager for database transactions.

        Usage:
            with self.transaction():
                self.session_repository.create(...)
                slot.is_available = False
        """
        try:
            yield self.db
            self.db.commit()
            self.logger.debug("Transaction committed successfully")
        except (SQLAlchemyError, RepositoryException) as e:
            self.logger.error(f"Transaction failed: {str(e)}")
            self.db.rollback()
            raise ServiceException(f"Database operation failed: {str(e)}")
        except Exception as e:
            self.logger.error(f"Unexpected error in transaction: {str(e)}")
            self.db.rollback()
            raise

    @staticmethod
    def measure_operation(operation_name: str) -> Callable[[F], F]:
        """
        Decorator timing a service method.

        Usage:
            @BaseService.measure_operation("create_session")
            def create_session(self, ...):
                ...
        """

        def decorator(func: F) -> F:
            if asyncio.iscoroutinefunction(func):

                @wraps(func)
                async def async_wrapper(self, *args, **kwargs):
                    start_time = time.time()
                    error_type: Optional[str] = None
                    try:
                        return await func(self, *args, **kwargs)
                    except Exception as e:
                        error_type = type(e).__name__
                        raise
                    finally:
                        _finish_measurement(self, operation_name, start_time, error_type)

                return cast(F, async_wrapper)

            @wraps(func)
            def wrapper(self, *args, **kwargs):
                start_time = time.time()
                error_type: Optional[str] = None
                try:
                    return func(self, *args, **kwargs)
                except Exception as e:
                    error_type = type(e).__name__
                    raise
                finally:
                    _finish_measurement(self, operation_name, start_time, error_type)

            return cast(F, wrapper)

        return decorator

    def log_operation(self, operation: str, **context) -> None:
        """Log an operation with structured context."""
        self.logger.info(f"Operation: {operation}", extra={"operation": operation, **context})


def _finish_measurement(
    service: Any, operation_name: str, start_time: float, error_type: Optional[str]
) -> None:
    elapsed = time.time() - start_time
    success = error_type is None

    if elapsed > SLOW_OPERATION_SECONDS and hasattr(service, "logger"):
        service.logger.warning(f"Slow operation detected: {operation_name} took {elapsed:.2f}s")

    prometheus_metrics.record_service_operation(
        service=service.__class__.__name__,
        operation=operation_name,
        duration=elapsed,
        status="success" if success else "error",
        error_type=error_type,
    )
