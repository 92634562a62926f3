from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from skillswap.database import get_db
from skillswap.schemas.admin import AdminMessageRead
from skillswap.services.admin_service import list_global_messages


router = APIRouter(tags=["global-messages"])


@router.get("/global-messages", response_model=list[AdminMessageRead])
def read_global_messages(db: Session = Depends(get_db)) -> list[AdminMessageRead]:
    return list_global_messages(db, active_only=True)
