# auth.py
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from skillswap.constants import ROLE_ADMIN, ROLE_USER
from skillswap.config import is_admin_email
from skillswap.database import get_db
from skillswap.models.user import User
from skillswap.routers.dependencies import is_admin
from skillswap.schemas.user import AuthResponse, UserCreate, UserLogin, UserRead
from skillswap.utils.jwt_handler import create_access_token
from skillswap.utils.password_hash import hash_password, verify_password


router = APIRouter()

logger = logging.getLogger(__name__)


def _auth_response(user: User) -> AuthResponse:
    token = create_access_token(user.id, email=user.email, role=user.role)
    user_out = UserRead.model_validate(user).model_copy(update={"is_admin": is_admin(user)})
    return AuthResponse(user=user_out, access_token=token, token_type="bearer")


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register_user(user_in: UserCreate, db: Session = Depends(get_db)) -> AuthResponse:
    existing_user = db.query(User).filter(User.email == user_in.email).first()
    if existing_user:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="User already exists with this email")
    user = User(
        email=user_in.email,
        password=hash_password(user_in.password),
        name=user_in.name.strip(),
        location=(user_in.location or "").strip() or None,
        availability=list(dict.fromkeys(user_in.availability)),
        role=ROLE_ADMIN if is_admin_email(user_in.email) else ROLE_USER,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("auth.registered user_id=%s", user.id)
    return _auth_response(user)


@router.post("/login", response_model=AuthResponse)
def login_user(user_in: UserLogin, db: Session = Depends(get_db)) -> AuthResponse:
    user = db.query(User).filter(User.email == user_in.email).first()
    if not user or not verify_password(user_in.password, user.password):
        logger.warning("auth.login_failed email=%s", user_in.email)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid email or password")
    if user.is_banned:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Your account has been banned. Please contact support.",
        )
    return _auth_response(user)
