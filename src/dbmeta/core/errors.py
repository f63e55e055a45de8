"""Error types raised by the dbmeta core.

CLI frontends decide how each error maps to an exit code; the core only
raises them.
"""


class DbMetaError(RuntimeError):
    """Base class for all dbmeta errors."""


class ValidationError(DbMetaError):
    """Raised when user input (directories, connection strings) is invalid."""


class UnsupportedTypeError(DbMetaError):
    """Raised when a catalog field type code has no SQL rendering."""

    def __init__(self, field_type: int):
        super().__init__(f"Unsupported field type: {field_type}")
        self.field_type = field_type


class CatalogQueryError(DbMetaError):
    """Raised when a catalog query fails or returns an unexpected shape."""


class StatementExecutionError(DbMetaError):
    """Raised when a single DDL statement fails to execute."""

    def __init__(self, statement: str, message: str):
        super().__init__(message)
        self.statement = statement
