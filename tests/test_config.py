from __future__ import annotations

from skillswap.config import Settings, build_sqlalchemy_db_url, get_admin_allowlist


def test_admin_emails_accept_comma_separated_and_json(monkeypatch) -> None:
    monkeypatch.setenv("ADMIN_EMAILS", " Ops@Example.com , admin@example.com ")
    assert Settings().admin_emails == ["ops@example.com", "admin@example.com"]

    monkeypatch.setenv("ADMIN_EMAILS", '["Boss@Example.com"]')
    assert Settings().admin_emails == ["boss@example.com"]


def test_admin_allowlist_reload_reads_environment(monkeypatch) -> None:
    monkeypatch.setenv("ADMIN_EMAILS", "late@example.com")
    assert get_admin_allowlist(reload=True) == {"late@example.com"}


def test_db_url_selection(monkeypatch) -> None:
    monkeypatch.delenv("DB_URL", raising=False)
    monkeypatch.setenv("ENVIRONMENT", "development")
    monkeypatch.setenv("DB_USE_MYSQL", "false")
    assert build_sqlalchemy_db_url(Settings(_env_file=None)) == "sqlite:///./skillswap.db"

    monkeypatch.setenv("DB_USE_MYSQL", "true")
    monkeypatch.setenv("DB_USER", "svc")
    monkeypatch.setenv("DB_PASSWORD", "pw")
    monkeypatch.setenv("DB_HOST", "db.internal")
    monkeypatch.setenv("DB_NAME", "swap")
    url = build_sqlalchemy_db_url(Settings(_env_file=None))
    assert url == "mysql+pymysql://svc:pw@db.internal:3306/swap?charset=utf8mb4"

    monkeypatch.setenv("DB_URL", "sqlite:///./other.db")
    assert build_sqlalchemy_db_url(Settings(_env_file=None)) == "sqlite:///./other.db"
