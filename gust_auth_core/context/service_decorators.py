"""
Service decorators for the credential store and validator.

Keeps persistence error handling out of the service method bodies.
"""

from functools import wraps
from typing import Any, Callable, Optional, TypeVar, cast

from sqlalchemy.exc import SQLAlchemyError

from ..exceptions import BaseError, StorageError

F = TypeVar("F", bound=Callable[..., Any])


def handle_storage_errors(operation_name: Optional[str] = None):
    """
    Decorator to convert raw database failures into StorageError.

    The wrapped method's object must expose a SQLAlchemy ``session``; it is
    rolled back before the StorageError is raised. Typed domain errors
    (BaseError subclasses) pass through untouched.

    Usage:
        @handle_storage_errors("create_credential")
        def create_credential(self, ...):
            ...
    """

    def decorator(func: F) -> F:
        @wraps(func)
        def wrapper(self, *args, **kwargs):
            op_name = operation_name or func.__name__
            try:
                return func(self, *args, **kwargs)
            except BaseError:
                raise
            except SQLAlchemyError as e:
                session = getattr(self, "session", None)
                if session is not None:
                    session.rollback()
                raise StorageError(
                    f"Storage failure in {op_name}: {str(e)}",
                    cause=e,
                    operation=op_name,
                ) from e

        return cast(F, wrapper)

    return decorator
