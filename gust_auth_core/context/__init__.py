"""Cross-cutting helpers: operation logging and storage error handling."""

from .operation_context import OperationContext, OperationHandler, operation
from .service_decorators import handle_storage_errors

__all__ = ["OperationContext", "OperationHandler", "operation", "handle_storage_errors"]
