"""Custom exceptions for database and domain operations."""


class DatabaseError(Exception):
    """Base exception for database errors."""
    pass


class DatabaseConstraintError(DatabaseError):
    """Database constraint violation (duplicate, foreign key, etc)."""
    pass


class DatabaseOperationError(DatabaseError):
    """General database operation failed."""
    pass


class EntityNotFoundError(DatabaseError):
    """Requested entity not found (or not owned by the caller)."""
    pass


class ValidationError(DatabaseError):
    """Data validation failed before database operation."""
    pass


class ConflictError(DatabaseError):
    """Operation blocked by existing records (duplicate email, dependent tasks)."""
    pass
