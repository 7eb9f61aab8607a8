from sqlalchemy import inspect

from app.core.config import Settings
from app.db.init_db import init_db
from app.db.session import engine


def test_database_uri_assembled_from_parts():
    settings = Settings(
        SQLALCHEMY_DATABASE_URI=None,
        POSTGRES_HOST="db",
        POSTGRES_PORT="5433",
        POSTGRES_USER="app",
        POSTGRES_PASSWORD="pw",
        POSTGRES_DB="secrets",
    )
    assert settings.SQLALCHEMY_DATABASE_URI == "postgresql://app:pw@db:5433/secrets"


def test_explicit_database_uri_wins():
    settings = Settings(SQLALCHEMY_DATABASE_URI="sqlite:///./local.db")
    assert settings.SQLALCHEMY_DATABASE_URI == "sqlite:///./local.db"


def test_cors_origins_split():
    settings = Settings(BACKEND_CORS_ORIGINS="http://a.test, http://b.test,")
    assert settings.cors_origins == ["http://a.test", "http://b.test"]


def test_init_db_creates_tables():
    init_db()
    tables = set(inspect(engine).get_table_names())
    assert {"secrets", "users"} <= tables
