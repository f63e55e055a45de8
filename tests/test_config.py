import pytest

from dbmeta.core.config import (
    PORT_ENV,
    USER_ENV,
    ConnectionSettings,
    default_settings,
    parse_connection_string,
)
from dbmeta.core.errors import ValidationError


def test_parse_provider_style_connection_string():
    settings = parse_connection_string(
        "User=SYSDBA;Password=secret;Database=/data/shop.fdb;"
        "DataSource=db.local;Port=3051;Dialect=3;Charset=UTF8;Pooling=true"
    )

    assert settings == ConnectionSettings(
        database="/data/shop.fdb",
        user="SYSDBA",
        password="secret",
        host="db.local",
        port=3051,
        dialect=3,
        charset="UTF8",
    )
    assert settings.dsn == "db.local/3051:/data/shop.fdb"


def test_parse_accepts_key_aliases_case_insensitively():
    settings = parse_connection_string(
        "user id=APP; PWD=x ; initial catalog=C:\\db\\shop.fdb; data source=srv; ROLE=RDB$ADMIN"
    )

    assert settings.user == "APP"
    assert settings.password == "x"
    assert settings.database == "C:\\db\\shop.fdb"
    assert settings.host == "srv"
    assert settings.role == "RDB$ADMIN"


def test_parse_bare_dsn():
    settings = parse_connection_string("localhost:/data/shop.fdb")

    assert settings.host is None
    assert settings.dsn == "localhost:/data/shop.fdb"


@pytest.mark.parametrize(
    ("value", "message"),
    [
        ("", "empty"),
        ("User=SYSDBA;Password=x", "does not specify a database"),
        ("Database=/x.fdb;Port=abc", "Port"),
        ("Database=/x.fdb;garbage", "garbage"),
    ],
)
def test_parse_rejects_invalid_strings(value: str, message: str):
    with pytest.raises(ValidationError, match=message):
        parse_connection_string(value)


def test_default_settings_use_builtin_defaults(monkeypatch):
    for name in ("DBMETA_USER", "DBMETA_PASSWORD", "DBMETA_HOST", "DBMETA_PORT"):
        monkeypatch.delenv(name, raising=False)

    settings = default_settings("/data/new_database.fdb")

    assert settings.user == "SYSDBA"
    assert settings.password == "masterkey"
    assert settings.page_size == 4096
    assert settings.dialect == 3
    assert settings.charset == "UTF8"
    assert settings.dsn == "localhost/3050:/data/new_database.fdb"


def test_default_settings_honor_environment(monkeypatch):
    monkeypatch.setenv(USER_ENV, "BUILDER")
    monkeypatch.setenv(PORT_ENV, "3055")

    settings = default_settings("/db.fdb")

    assert settings.user == "BUILDER"
    assert settings.port == 3055


def test_default_settings_ignore_invalid_port(monkeypatch):
    monkeypatch.setenv(PORT_ENV, "not-a-port")

    assert default_settings("/db.fdb").port == 3050
