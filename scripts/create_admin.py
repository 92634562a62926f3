from __future__ import annotations

import argparse
import secrets
import string
import sys
from pathlib import Path


def _bootstrap_import_path() -> None:
    # Allow running as: python scripts/create_admin.py
    root = Path(__file__).resolve().parents[1]
    if str(root) not in sys.path:
        sys.path.insert(0, str(root))


_bootstrap_import_path()

from skillswap.config import build_sqlalchemy_db_url, normalize_email, settings  # noqa: E402
from skillswap.constants import ROLE_ADMIN  # noqa: E402
from skillswap.database import Base, SessionLocal, engine  # noqa: E402
from skillswap.models.user import User  # noqa: E402
from skillswap.utils.password_hash import hash_password  # noqa: E402


def _ensure_tables() -> None:
    if build_sqlalchemy_db_url(settings).startswith("sqlite"):
        Base.metadata.create_all(bind=engine)


def _generate_password(length: int = 20) -> str:
    alphabet = string.ascii_letters + string.digits
    return "".join(secrets.choice(alphabet) for _ in range(length))


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Create an admin account, or promote an existing account to admin.",
    )
    parser.add_argument("--email", required=True, help="Admin user email")
    parser.add_argument("--password", default=None, help="Admin user password (generated if omitted)")
    parser.add_argument("--name", default="Admin", help="Display name")
    parser.add_argument(
        "--update-password",
        action="store_true",
        help="If the user exists, overwrite their password",
    )

    args = parser.parse_args(argv)
    email = normalize_email(args.email)

    _ensure_tables()

    password = args.password or _generate_password()

    with SessionLocal() as db:
        user = db.query(User).filter(User.email == email).first()
        created = user is None
        if user is None:
            user = User(email=email, password=hash_password(password), name=args.name, role=ROLE_ADMIN)
            db.add(user)
        else:
            user.role = ROLE_ADMIN
            user.is_banned = False
            if args.update_password:
                user.password = hash_password(password)
        db.commit()
        db.refresh(user)
        user_id = user.id

    if created:
        print(f"created admin id={user_id} email={email}")
        if args.password is None:
            print(f"generated password: {password}")
    else:
        print(f"promoted existing user to admin email={email}")
        if args.update_password:
            print("password updated")

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
