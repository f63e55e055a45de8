"""Connection settings for Firebird databases.

Connection strings are accepted in the provider style used by Firebird
tooling (`User=SYSDBA;Password=...;Database=...;DataSource=...`) or as a
bare DSN. Defaults for new databases can be overridden through environment
variables.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, replace

from dbmeta.core.errors import ValidationError

DEFAULT_USER = "SYSDBA"
DEFAULT_PASSWORD = "masterkey"
DEFAULT_HOST = "localhost"
DEFAULT_PORT = 3050
DEFAULT_DIALECT = 3
DEFAULT_CHARSET = "UTF8"
DEFAULT_PAGE_SIZE = 4096

USER_ENV = "DBMETA_USER"
PASSWORD_ENV = "DBMETA_PASSWORD"
HOST_ENV = "DBMETA_HOST"
PORT_ENV = "DBMETA_PORT"

_KEY_ALIASES = {
    "user": "user",
    "user id": "user",
    "userid": "user",
    "username": "user",
    "password": "password",
    "pwd": "password",
    "database": "database",
    "initial catalog": "database",
    "datasource": "host",
    "data source": "host",
    "server": "host",
    "host": "host",
    "port": "port",
    "port number": "port",
    "dialect": "dialect",
    "charset": "charset",
    "character set": "charset",
    "role": "role",
    "role name": "role",
}

_INT_FIELDS = {"port", "dialect"}


@dataclass(frozen=True)
class ConnectionSettings:
    """
    Everything needed to connect to (or create) a Firebird database.

    Attributes:
        database: Database file path or alias.
        host: Server host; None means `database` is already a complete DSN.
        page_size: Page size used when creating a database.
    """

    database: str
    user: str = DEFAULT_USER
    password: str = DEFAULT_PASSWORD
    host: str | None = DEFAULT_HOST
    port: int = DEFAULT_PORT
    dialect: int = DEFAULT_DIALECT
    charset: str = DEFAULT_CHARSET
    role: str | None = None
    page_size: int = DEFAULT_PAGE_SIZE

    @property
    def dsn(self) -> str:
        """Return the DSN in `host/port:database` form."""
        if not self.host:
            return self.database
        return f"{self.host}/{self.port}:{self.database}"


def _env_port() -> int:
    """Return the port from the environment, falling back to the default."""
    raw = os.getenv(PORT_ENV)
    if raw is None:
        return DEFAULT_PORT
    try:
        port = int(raw)
    except ValueError:
        return DEFAULT_PORT
    return port if port > 0 else DEFAULT_PORT


def default_settings(database: str) -> ConnectionSettings:
    """Return settings for a local database, honoring environment overrides."""
    return ConnectionSettings(
        database=database,
        user=os.getenv(USER_ENV) or DEFAULT_USER,
        password=os.getenv(PASSWORD_ENV) or DEFAULT_PASSWORD,
        host=os.getenv(HOST_ENV) or DEFAULT_HOST,
        port=_env_port(),
    )


def parse_connection_string(value: str) -> ConnectionSettings:
    """
    Parse a connection string into settings.

    A string without `=` is treated as a bare DSN (e.g. `localhost:/data/app.fdb`).
    Keys are case-insensitive; provider options that do not affect the
    connection (pooling, timeouts) are ignored.

    Raises:
        ValidationError: If the string is empty, malformed or has no database.
    """
    text = (value or "").strip()
    if not text:
        raise ValidationError("Connection string is empty.")

    if "=" not in text:
        return ConnectionSettings(database=text, host=None)

    fields: dict[str, object] = {}
    for part in text.split(";"):
        part = part.strip()
        if not part:
            continue
        if "=" not in part:
            raise ValidationError(f"Invalid connection string segment: '{part}'")
        key, raw = part.split("=", 1)
        name = _KEY_ALIASES.get(" ".join(key.lower().split()))
        if name is None:
            continue
        raw = raw.strip()
        if name in _INT_FIELDS:
            try:
                fields[name] = int(raw)
            except ValueError as exc:
                raise ValidationError(f"Invalid value for {key.strip()}: '{raw}'") from exc
        else:
            fields[name] = raw

    database = fields.pop("database", None)
    if not database:
        raise ValidationError("Connection string does not specify a database.")

    settings = ConnectionSettings(database=str(database))
    return replace(settings, **fields)
