from __future__ import annotations

import logging
from typing import Literal

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import Response
from sqlalchemy.orm import Session

from skillswap.database import get_db
from skillswap.models.user import User
from skillswap.routers.dependencies import require_admin
from skillswap.schemas.admin import (
    AdminActionRequest,
    AdminActionResponse,
    AdminDataPage,
    AdminMessageRead,
    AdminStatsResponse,
    AdminSwapDetail,
    ApproveSkillRequest,
    BanUserRequest,
    MetricSummary,
    SwapStatisticsReport,
    ToggleMessageRequest,
    ToggleMessageResponse,
    UserActivityReport,
)
from skillswap.services import admin_service


router = APIRouter(prefix="/admin", tags=["admin"])

logger = logging.getLogger(__name__)

REPORT_FILENAMES = {
    "users": "user-activity-report.csv",
    "swaps": "swap-statistics-report.csv",
}


@router.get("/stats", response_model=AdminStatsResponse)
def get_admin_stats(
    db: Session = Depends(get_db),
    _admin: User = Depends(require_admin),
) -> AdminStatsResponse:
    return admin_service.get_stats(db)


@router.get("/data", response_model=AdminDataPage)
def get_admin_data(
    type: str = Query(...),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=100),
    db: Session = Depends(get_db),
    _admin: User = Depends(require_admin),
) -> AdminDataPage:
    return admin_service.get_data_page(db, type, page=page, limit=limit)


@router.get("/data/swaps", response_model=list[AdminSwapDetail])
def get_admin_swaps(
    db: Session = Depends(get_db),
    _admin: User = Depends(require_admin),
) -> list[AdminSwapDetail]:
    return admin_service.list_swaps(db)


@router.get("/data/messages", response_model=list[AdminMessageRead])
def get_admin_messages(
    db: Session = Depends(get_db),
    _admin: User = Depends(require_admin),
) -> list[AdminMessageRead]:
    return admin_service.list_global_messages(db, active_only=False)


@router.post("/actions", response_model=AdminActionResponse)
def perform_admin_action(
    payload: AdminActionRequest,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
) -> AdminActionResponse:
    logger.info("admin.action action=%s target_id=%s admin_id=%s", payload.action, payload.target_id, admin.id)
    message = admin_service.perform_action(db, payload.action, payload.target_id, payload.data)
    return AdminActionResponse(message=message)


@router.post("/actions/approve-skill", response_model=AdminActionResponse)
def approve_skill(
    payload: ApproveSkillRequest,
    db: Session = Depends(get_db),
    _admin: User = Depends(require_admin),
) -> AdminActionResponse:
    if payload.approved:
        admin_service.set_skill_approved(db, payload.skill_id, True)
        return AdminActionResponse(message="Skill approved successfully")
    admin_service.delete_skill(db, payload.skill_id)
    return AdminActionResponse(message="Skill rejected and removed")


@router.post("/actions/ban-user", response_model=AdminActionResponse)
def ban_user(
    payload: BanUserRequest,
    db: Session = Depends(get_db),
    _admin: User = Depends(require_admin),
) -> AdminActionResponse:
    admin_service.set_user_banned(db, payload.user_id, True)
    return AdminActionResponse(message="User banned successfully")


@router.post("/actions/toggle-message", response_model=ToggleMessageResponse)
def toggle_message(
    payload: ToggleMessageRequest,
    db: Session = Depends(get_db),
    _admin: User = Depends(require_admin),
) -> ToggleMessageResponse:
    message = admin_service.set_message_active(db, payload.message_id, payload.is_active)
    verb = "activated" if payload.is_active else "deactivated"
    return ToggleMessageResponse(
        message=f"Message {verb} successfully",
        data=AdminMessageRead.model_validate(message),
    )


@router.delete("/actions/delete-message/{message_id}", response_model=AdminActionResponse)
def delete_message(
    message_id: int,
    db: Session = Depends(get_db),
    _admin: User = Depends(require_admin),
) -> AdminActionResponse:
    admin_service.delete_message(db, message_id)
    return AdminActionResponse(message="Message deleted successfully")


@router.get("/reports", response_model=UserActivityReport | SwapStatisticsReport)
def get_report(
    type: Literal["users", "swaps"] = Query(...),
    format: Literal["json", "csv"] = Query(default="json"),
    db: Session = Depends(get_db),
    _admin: User = Depends(require_admin),
):
    if type == "users":
        report = admin_service.user_activity_report(db)
        body = admin_service.user_activity_csv(report) if format == "csv" else None
    else:
        report = admin_service.swap_statistics_report(db)
        body = admin_service.swap_statistics_csv(report) if format == "csv" else None

    if body is None:
        return report
    return Response(
        content=body,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{REPORT_FILENAMES[type]}"'},
    )


@router.get("/metrics", response_model=dict[str, MetricSummary])
def get_metrics(request: Request, _admin: User = Depends(require_admin)) -> dict[str, MetricSummary]:
    metrics = getattr(request.app.state, "metrics", None)
    if metrics is None:
        return {}
    return {label: MetricSummary(**values) for label, values in metrics.snapshot().items()}
