# dependencies.py
import logging

from fastapi import Depends, HTTPException, Query, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from skillswap.config import is_admin_account, settings
from skillswap.database import get_db
from skillswap.models.user import User
from skillswap.utils.jwt_handler import decode_user_id


logger = logging.getLogger(__name__)

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login")
optional_oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login", auto_error=False)


def is_admin(user: User) -> bool:
    return is_admin_account(user.role, user.email)


def _member_for_token(db: Session, token: str) -> User:
    user = db.query(User).filter(User.id == decode_user_id(token)).first()
    if user is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="User not found")
    if user.is_banned:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Your account has been banned")
    return user


def get_current_user(db: Session = Depends(get_db), token: str = Depends(oauth2_scheme)) -> User:
    return _member_for_token(db, token)


def get_optional_user(db: Session = Depends(get_db), token: str | None = Depends(optional_oauth2_scheme)) -> User | None:
    # Anonymous visitors browse public profiles; a bad token is still rejected.
    if not token:
        return None
    return _member_for_token(db, token)


def require_admin(current_user: User = Depends(get_current_user)) -> User:
    if not is_admin(current_user):
        logger.warning("admin.denied user_id=%s", current_user.id)
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin access required")
    return current_user


def page_params(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=settings.pagination_default_limit, ge=1, le=settings.pagination_max_limit),
) -> tuple[int, int]:
    return page, limit
