from __future__ import annotations

from pathlib import Path
from typing import Any, Sequence

from firebird.driver import Connection, DatabaseError, connect, create_database, driver_config

from dbmeta.core.config import ConnectionSettings
from dbmeta.core.errors import CatalogQueryError, StatementExecutionError


class FirebirdAdapter:
    """Adapter around a firebird-driver connection (catalog queries + DDL execution)."""

    def __init__(self, connection: Connection) -> None:
        self.connection = connection
        self._pending: str | None = None

    def query(self, sql: str, params: Sequence[Any] = ()) -> list[tuple]:
        """Run a catalog query and return all rows."""
        try:
            with self.connection.cursor() as cur:
                cur.execute(sql, tuple(params))
                return list(cur.fetchall())
        except DatabaseError as exc:
            raise CatalogQueryError(f"Catalog query failed: {exc}") from exc

    def execute(self, statement: str) -> None:
        """Execute a single DDL statement in the current transaction."""
        self._pending = statement
        try:
            with self.connection.cursor() as cur:
                cur.execute(statement)
        except DatabaseError as exc:
            raise StatementExecutionError(statement, str(exc)) from exc

    def commit(self) -> None:
        """Commit; Firebird reports most DDL errors here rather than on execute."""
        statement, self._pending = self._pending, None
        try:
            self.connection.commit()
        except DatabaseError as exc:
            raise StatementExecutionError(statement or "COMMIT", str(exc)) from exc

    def rollback(self) -> None:
        statement, self._pending = self._pending, None
        try:
            self.connection.rollback()
        except DatabaseError as exc:
            raise StatementExecutionError(statement or "ROLLBACK", str(exc)) from exc

    def close(self) -> None:
        self.connection.close()

    def __enter__(self) -> "FirebirdAdapter":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


def open_database(settings: ConnectionSettings) -> FirebirdAdapter:
    """Connect to an existing database."""
    connection = connect(
        settings.dsn,
        user=settings.user,
        password=settings.password,
        role=settings.role,
        charset=settings.charset,
    )
    return FirebirdAdapter(connection)


def create_new_database(
    settings: ConnectionSettings, *, overwrite: bool = False
) -> FirebirdAdapter:
    """
    Create a database file and return an adapter connected to it.

    Page size, SQL dialect and character set come from the settings and are
    applied through the driver's database defaults.
    """
    defaults = driver_config.db_defaults
    defaults.page_size.value = settings.page_size
    defaults.db_sql_dialect.value = settings.dialect
    defaults.db_charset.value = settings.charset

    connection = create_database(
        settings.dsn,
        user=settings.user,
        password=settings.password,
        charset=settings.charset,
        overwrite=overwrite,
    )
    return FirebirdAdapter(connection)


def database_path(db_dir: Path, file_name: str = "new_database.fdb") -> Path:
    """Return the absolute path of the database file built inside `db_dir`."""
    return (Path(db_dir) / file_name).resolve()
