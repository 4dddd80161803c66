"""Tests for database URL handling."""
import pytest

from backend.db.session import database_url


@pytest.mark.parametrize(
    "url,expected",
    [
        ("postgres://u:p@db.example.com/app", "postgresql+psycopg://u:p@db.example.com/app"),
        ("postgresql://u:p@db.example.com/app", "postgresql+psycopg://u:p@db.example.com/app"),
        ("sqlite+pysqlite:///:memory:", "sqlite+pysqlite:///:memory:"),
    ],
)
def test_database_url_uses_psycopg_driver(url, expected):
    assert database_url(url) == expected


def test_supabase_pooler_requires_ssl():
    url = database_url("postgresql://u:p@aws-0-eu-west-2.pooler.supabase.com:6543/postgres")

    assert url.endswith("/postgres?sslmode=require")
    assert database_url(url + "&x=1") == url + "&x=1"


def test_missing_database_url_raises():
    with pytest.raises(RuntimeError):
        database_url("")
