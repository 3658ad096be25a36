"""Project-wide custom exceptions."""

from __future__ import annotations


class SqlGridError(Exception):
    """Base exception for the sqlgrid toolkit."""


class ConfigurationError(SqlGridError):
    """Raised when configuration loading or validation fails."""


class DatabaseError(SqlGridError):
    """Raised for database-related issues."""


class DataAccessError(DatabaseError):
    """Raised when a cursor, large-object or metadata read fails."""


class QueryError(DatabaseError):
    """Raised when query orchestration or execution fails."""


class UnsupportedCapabilityError(SqlGridError, NotImplementedError):
    """Raised by drivers that cannot answer an optional capability."""


class UnsupportedOperationError(SqlGridError, NotImplementedError):
    """Raised when a row source is used in a way it does not support."""
