"""
Exception hierarchy for the Weaviate binding adapter.

All exceptions inherit from ``EdgeBinderError`` and provide ``to_dict()``
for API-friendly error responses.
"""

from __future__ import annotations

from difflib import get_close_matches
from typing import Any


class EdgeBinderError(Exception):
    """Root exception for the adapter."""

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.__class__.__name__,
            "message": str(self),
        }


class InvalidMetadataError(EdgeBinderError):
    """Metadata violates a structural invariant (key, kind, depth or size).

    ``path`` is the dotted path of the offending key where one applies.
    """

    def __init__(self, message: str, path: str | None = None) -> None:
        self.message = message
        self.path = path
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "INVALID_METADATA",
            "message": self.message,
            "path": self.path,
        }


class EntityExtractionError(EdgeBinderError):
    """An object passed as an entity does not implement the ``Entity`` protocol."""

    def __init__(self, message: str, entity: object | None = None) -> None:
        self.entity = entity
        super().__init__(message)


class BindingNotFoundError(EdgeBinderError):
    """Raised when a binding cannot be found by its id."""

    def __init__(self, binding_id: str) -> None:
        self.binding_id = binding_id
        super().__init__(f"Binding with id={binding_id!r} not found")

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "BINDING_NOT_FOUND",
            "binding_id": self.binding_id,
        }


class ConfigurationError(EdgeBinderError):
    """Adapter configuration is invalid."""


# ── Query errors ─────────────────────────────────────────────────────


class QueryError(EdgeBinderError):
    """Base class for criteria and query evaluation errors."""


class UnsupportedOperatorError(QueryError):
    """
    Unknown comparison operator in a where-condition.

    Provides fuzzy-matched suggestions for likely intended operators.
    """

    def __init__(self, operator: str, valid_operators: list[str]) -> None:
        self.operator = operator
        self.valid_operators = valid_operators
        self.suggestions = get_close_matches(operator, valid_operators, n=3, cutoff=0.6)

        message = f"Unsupported operator: '{operator}'."
        if self.suggestions:
            message += f" Did you mean: {', '.join(self.suggestions)}?"
        message += f" Valid operators: {', '.join(valid_operators)}"
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "UNSUPPORTED_OPERATOR",
            "operator": self.operator,
            "suggestions": self.suggestions,
            "valid_operators": list(self.valid_operators),
        }


class InvalidCriteriaError(QueryError):
    """A criteria value cannot be evaluated (bad literal shape, incomparable types)."""

    def __init__(self, message: str, field: str | None = None) -> None:
        self.message = message
        self.field = field
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "INVALID_CRITERIA",
            "message": self.message,
            "field": self.field,
        }


class QueryExecutionError(QueryError):
    """A query builder was executed without an executor bound to it."""


# ── Persistence errors ───────────────────────────────────────────────


class PersistenceError(EdgeBinderError):
    """Base class for wire-format and backing-store failures."""

    def __init__(self, operation: str, reason: str) -> None:
        self.operation = operation
        self.reason = reason
        super().__init__(f"{operation}: {reason}")

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.__class__.__name__,
            "operation": self.operation,
            "message": self.reason,
        }


class SerializationError(PersistenceError):
    """Metadata could not be encoded to the wire format."""

    def __init__(self, reason: str) -> None:
        super().__init__("serialize_metadata", reason)


class DeserializationError(PersistenceError):
    """Wire text could not be decoded back to metadata or a binding."""

    def __init__(self, reason: str, operation: str = "deserialize_metadata") -> None:
        super().__init__(operation, reason)


class BackendError(PersistenceError):
    """
    The backing-store collaborator failed.

    ``retryable`` separates transient transport/server failures from
    client failures that will fail again on retry.
    """

    def __init__(
        self,
        operation: str,
        reason: str,
        *,
        retryable: bool = False,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.retryable = retryable
        self.error_code = error_code
        self.details = details
        super().__init__(operation, reason)

    @classmethod
    def connection_error(cls, operation: str, message: str) -> BackendError:
        return cls(
            operation,
            f"Backend connection error: {message}",
            retryable=True,
        )

    @classmethod
    def client_error(
        cls,
        operation: str,
        message: str,
        *,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> BackendError:
        return cls(
            operation,
            f"Backend client error: {message}",
            retryable=False,
            error_code=error_code,
            details=details,
        )

    @classmethod
    def server_error(
        cls,
        operation: str,
        message: str,
        *,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> BackendError:
        return cls(
            operation,
            f"Backend server error: {message}",
            retryable=True,
            error_code=error_code,
            details=details,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "BACKEND_ERROR",
            "operation": self.operation,
            "message": self.reason,
            "retryable": self.retryable,
            "error_code": self.error_code,
        }
