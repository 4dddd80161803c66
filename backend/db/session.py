"""Database engine and session factory for freebet and settings storage."""
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from backend.config import Config


_PSYCOPG_SCHEME = "postgresql+psycopg://"


def database_url(url: str) -> str:
    """Point Supabase/Postgres URLs at the psycopg 3 driver and require TLS on the pooler."""
    if not url:
        raise RuntimeError("DATABASE_URL is not set.")
    for scheme in ("postgresql://", "postgres://"):
        if url.startswith(scheme):
            url = _PSYCOPG_SCHEME + url[len(scheme):]
            break

    if "pooler.supabase.com" in url and "sslmode=" not in url:
        url += ("&" if "?" in url else "?") + "sslmode=require"
    return url


def build_engine(url: str) -> Engine:
    url = database_url(url)
    if url.startswith("sqlite") and ":memory:" in url:
        # one shared connection so every session sees the same in-memory tables
        return create_engine(
            url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    return create_engine(url, pool_pre_ping=True)


engine = build_engine(Config.DATABASE_URL)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db():
    """FastAPI dependency yielding a session that is closed after the request."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
