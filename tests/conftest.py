from __future__ import annotations

import os
from typing import Any

import pytest
from fastapi.testclient import TestClient


def pytest_configure() -> None:
    # The engine is built at import time; point it at a throwaway sqlite file first.
    os.environ["DB_URL"] = "sqlite:///./test_skillswap.db"
    os.environ["DB_USE_MYSQL"] = "false"
    os.environ["ENVIRONMENT"] = "test"
    os.environ["ADMIN_EMAILS"] = "admin@example.com"
    os.environ["ADMIN_EMAILS_RELOAD"] = "false"
    os.environ["JWT_SECRET"] = "test-secret"
    os.environ["PASSWORD_HASH_ITERATIONS"] = "1000"


@pytest.fixture()
def client() -> Any:
    from skillswap.database import Base, engine
    from skillswap.main import create_app

    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)

    app = create_app()
    with TestClient(app) as c:
        yield c


@pytest.fixture()
def catalog(client) -> dict[str, int]:
    """Approved skills keyed by name."""
    from skillswap.database import SessionLocal
    from skillswap.models.skills import Skill

    names = [
        ("Python", "Programming"),
        ("JavaScript", "Programming"),
        ("Figma", "Design"),
        ("Spanish", "Language"),
        ("Photography", "Creative"),
    ]
    with SessionLocal() as db:
        skills = [Skill(name=n, category=c, is_approved=True) for n, c in names]
        db.add_all(skills)
        db.commit()
        return {s.name: s.id for s in skills}
