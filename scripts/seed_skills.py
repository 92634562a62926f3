from __future__ import annotations

import argparse
import sys
from pathlib import Path


def _bootstrap_import_path() -> None:
    # Allow running as: python scripts/seed_skills.py
    root = Path(__file__).resolve().parents[1]
    if str(root) not in sys.path:
        sys.path.insert(0, str(root))


_bootstrap_import_path()

from sqlalchemy.orm import Session  # noqa: E402

from skillswap.config import build_sqlalchemy_db_url, settings  # noqa: E402
from skillswap.constants import DEFAULT_SKILLS  # noqa: E402
from skillswap.database import Base, SessionLocal, engine  # noqa: E402
from skillswap.models.skills import Skill  # noqa: E402


def seed_skills(db: Session, skills: tuple[tuple[str, str], ...] = DEFAULT_SKILLS) -> tuple[int, int]:
    """Insert missing catalogue skills as approved. Returns (inserted, approved)."""
    existing = {s.name: s for s in db.query(Skill).filter(Skill.name.in_([n for n, _ in skills])).all()}
    inserted = 0
    approved = 0
    for name, category in skills:
        skill = existing.get(name)
        if skill is None:
            db.add(Skill(name=name, category=category, is_approved=True))
            inserted += 1
        elif not skill.is_approved:
            skill.is_approved = True
            approved += 1
    db.commit()
    return inserted, approved


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Seed the default, pre-approved skill catalogue.")
    parser.add_argument("--dry-run", action="store_true", help="Only print what would be inserted")
    args = parser.parse_args(argv)

    if args.dry_run:
        for name, category in DEFAULT_SKILLS:
            print(f"{category}: {name}")
        print(f"total={len(DEFAULT_SKILLS)}")
        return 0

    if build_sqlalchemy_db_url(settings).startswith("sqlite"):
        Base.metadata.create_all(bind=engine)

    with SessionLocal() as db:
        inserted, approved = seed_skills(db)

    print(f"OK: inserted={inserted} approved={approved} total={len(DEFAULT_SKILLS)}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
