"""Tests for mapping the configuration record onto SQLAlchemy engine settings."""

from unittest.mock import MagicMock, patch

from pgrest.config import PrestConfig
from pgrest.database import build_database_url, create_engine, engine_options


class TestBuildDatabaseURL:

    def test_fields_mapped(self):
        cfg = PrestConfig(
            pg_host="db",
            pg_port=6543,
            pg_user="prest",
            pg_pass="secret",
            pg_database="prest",
            queries_path="/tmp/q",
        )
        url = build_database_url(cfg)
        assert url.drivername == "postgresql+asyncpg"
        assert url.host == "db"
        assert url.port == 6543
        assert url.username == "prest"
        assert url.password == "secret"
        assert url.database == "prest"

    def test_empty_credentials_omitted(self):
        url = build_database_url(PrestConfig(queries_path="/tmp/q"))
        assert url.username is None
        assert url.password is None
        assert url.database is None
        assert url.render_as_string(hide_password=False) == "postgresql+asyncpg://127.0.0.1:5432"


class TestEngineOptions:

    def test_pool_limits(self):
        cfg = PrestConfig(pg_max_idle_conn=5, pg_max_open_conn=20, queries_path="/tmp/q")
        options = engine_options(cfg)
        assert options["pool_size"] == 5
        assert options["max_overflow"] == 15

    def test_open_below_idle_gives_no_overflow(self):
        cfg = PrestConfig(pg_max_idle_conn=10, pg_max_open_conn=2, queries_path="/tmp/q")
        assert engine_options(cfg)["max_overflow"] == 0

    def test_zero_idle_keeps_one_connection(self):
        cfg = PrestConfig(pg_max_idle_conn=0, pg_max_open_conn=4, queries_path="/tmp/q")
        options = engine_options(cfg)
        assert options["pool_size"] == 1
        assert options["max_overflow"] == 3

    def test_connect_args(self):
        cfg = PrestConfig(pg_conn_timeout=3, ssl_mode="require", queries_path="/tmp/q")
        assert engine_options(cfg)["connect_args"] == {"timeout": 3, "ssl": "require"}

    def test_disabled_ssl_ignores_cert_paths(self):
        cfg = PrestConfig(ssl_mode="disable", ssl_cert="/nonexistent.crt", queries_path="/tmp/q")
        assert engine_options(cfg)["connect_args"]["ssl"] == "disable"

    def test_echo_follows_debug(self):
        assert engine_options(PrestConfig(debug=True, queries_path="/tmp/q"))["echo"] is True


class TestCreateEngine:

    def test_engine_built_from_record(self):
        cfg = PrestConfig(pg_host="db", queries_path="/tmp/q")
        with patch("pgrest.database.create_async_engine", return_value=MagicMock()) as factory:
            engine = create_engine(cfg)

        assert engine is factory.return_value
        (url,), kwargs = factory.call_args
        assert url.host == "db"
        assert kwargs == engine_options(cfg)
