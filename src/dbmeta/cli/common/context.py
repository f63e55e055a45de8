"""Application context management for the CLI."""

from dataclasses import dataclass
from pathlib import Path

from dbmeta.cli.common.exits import die
from dbmeta.core.adapters.firebird import (
    FirebirdAdapter,
    create_new_database,
    database_path,
    open_database,
)
from dbmeta.core.config import ConnectionSettings, default_settings, parse_connection_string
from dbmeta.core.errors import ValidationError
from dbmeta.core.reader import MetadataReader


@dataclass
class DbAppContext:
    """Application context holding connection settings and the Firebird adapter."""

    settings: ConnectionSettings
    adapter: FirebirdAdapter

    @property
    def reader(self) -> MetadataReader:
        return MetadataReader(self.adapter)


def parse_settings_or_exit(connection_string: str) -> ConnectionSettings:
    """Parse a connection string, converting invalid input into a CLI error."""
    try:
        return parse_connection_string(connection_string)
    except ValidationError as exc:
        die(str(exc), code=1)


def build_db_context(connection_string: str) -> DbAppContext:
    """
    Connect to an existing database.

    Args:
        connection_string: Connection string or DSN given on the command line.

    Returns:
        DbAppContext: Context with parsed settings and a connected adapter.
    """
    settings = parse_settings_or_exit(connection_string)
    return DbAppContext(settings=settings, adapter=open_database(settings))


def build_new_db_context(db_dir: Path, *, overwrite: bool = False) -> DbAppContext:
    """Create `<db_dir>/new_database.fdb` (creating the directory) and connect to it."""
    db_dir.mkdir(parents=True, exist_ok=True)
    settings = default_settings(str(database_path(db_dir)))
    return DbAppContext(
        settings=settings, adapter=create_new_database(settings, overwrite=overwrite)
    )
