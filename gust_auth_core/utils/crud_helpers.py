"""
Generic CRUD helpers shared by the credential store.

These functions work with any SQLAlchemy model and wrap persistence failures
in StorageError. Integrity violations are re-raised untouched so callers can
map them to domain errors (duplicate credential, upsert race).
"""

from typing import Any, Dict, Optional, Type, TypeVar

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ..exceptions import StorageError, not_found
from ..utils.datetime_utils import utc_now
from ..utils.logger import get_logger

T = TypeVar("T")


def create_record(session: Session, model_class: Type[T], data: Dict[str, Any]) -> T:
    """
    Generic create operation for any model.

    Args:
        session: Database session
        model_class: SQLAlchemy model class
        data: Data dictionary

    Returns:
        Created record instance

    Raises:
        IntegrityError: If a unique or foreign key constraint is violated
        StorageError: If creation fails for any other database reason
    """
    logger = get_logger()

    try:
        now = utc_now()
        if hasattr(model_class, "created_at"):
            data.setdefault("created_at", now)
        if hasattr(model_class, "updated_at"):
            data.setdefault("updated_at", now)

        record = model_class(**data)
        session.add(record)
        session.commit()

        logger.debug(
            f"Created {model_class.__name__}",
            extra={"model": model_class.__name__, "record_id": getattr(record, "id", None)},
        )

        return record

    except IntegrityError:
        session.rollback()
        raise
    except SQLAlchemyError as e:
        session.rollback()
        raise StorageError(
            f"Failed to create {model_class.__name__}: {str(e)}",
            cause=e,
            model=model_class.__name__,
        )


def get_record(session: Session, model_class: Type[T], filters: Dict[str, Any]) -> Optional[T]:
    """
    Generic get operation for any model.

    Args:
        session: Database session
        model_class: SQLAlchemy model class
        filters: Filter conditions

    Returns:
        Record instance or None
    """
    query = session.query(model_class)

    for key, value in filters.items():
        if hasattr(model_class, key) and value is not None:
            query = query.filter(getattr(model_class, key) == value)

    return query.first()


def update_record(
    session: Session,
    model_class: Type[T],
    filters: Dict[str, Any],
    data: Dict[str, Any],
) -> T:
    """
    Generic update operation for any model.

    Args:
        session: Database session
        model_class: SQLAlchemy model class
        filters: Conditions identifying the record to update
        data: Update data dictionary; None values are skipped

    Returns:
        Updated record instance

    Raises:
        RepositoryError: If no record matches (404)
        StorageError: If the update fails
    """
    logger = get_logger()

    record = get_record(session, model_class, filters)
    if not record:
        raise not_found(model_class.__name__, **filters)

    try:
        for key, value in data.items():
            if hasattr(record, key) and value is not None:
                setattr(record, key, value)

        if hasattr(record, "updated_at"):
            record.updated_at = utc_now()

        session.commit()

        logger.debug(
            f"Updated {model_class.__name__}",
            extra={"model": model_class.__name__, "record_id": getattr(record, "id", None)},
        )

        return record

    except SQLAlchemyError as e:
        session.rollback()
        raise StorageError(
            f"Failed to update {model_class.__name__}: {str(e)}",
            cause=e,
            model=model_class.__name__,
        )


def record_exists(session: Session, model_class: Type[T], filters: Dict[str, Any]) -> bool:
    """Check if a record exists with the given filters."""
    return get_record(session, model_class, filters) is not None
