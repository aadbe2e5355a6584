from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Depends, Header, HTTPException, Query
from pydantic import BaseModel
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from descomplicar.config import get_settings
from descomplicar.db.database import get_db
from descomplicar.models import NotificationTemplateUsageLog
from descomplicar.scheduler.jobs import run_expiration_triggers


def require_admin_key(x_admin_key: Optional[str] = Header(None)) -> None:
    settings = get_settings()
    # Require admin key in production
    if settings.is_production:
        if not settings.admin_api_key:
            raise HTTPException(status_code=503, detail="Admin API not configured")
        if x_admin_key != settings.admin_api_key:
            raise HTTPException(status_code=401, detail="Invalid admin key")


router = APIRouter(
    prefix="/api/admin",
    tags=["admin"],
    dependencies=[Depends(require_admin_key)],
)


class UsageLogResponse(BaseModel):
    id: int
    template_id: int
    trigger: str
    channel: str
    account_id: Optional[int]
    recipient_info: str
    trigger_date: str
    success: bool
    error_message: Optional[str]
    sent_at: Optional[str]


@router.get("/notification-usage")
async def list_notification_usage(
    limit: int = Query(50, ge=1, le=500),
    template_id: Optional[int] = Query(None, alias="templateId"),
    db: AsyncSession = Depends(get_db),
):
    stmt = select(NotificationTemplateUsageLog).order_by(
        NotificationTemplateUsageLog.id.desc()
    )
    if template_id is not None:
        stmt = stmt.where(NotificationTemplateUsageLog.template_id == template_id)
    result = await db.execute(stmt.limit(limit))
    logs = result.scalars().all()
    return {
        "items": [
            UsageLogResponse(
                id=log.id,
                template_id=log.template_id,
                trigger=log.trigger.value,
                channel=log.channel.value,
                account_id=log.account_id,
                recipient_info=log.recipient_info,
                trigger_date=log.trigger_date.isoformat(),
                success=log.success,
                error_message=log.error_message,
                sent_at=log.sent_at.isoformat() if log.sent_at else None,
            )
            for log in logs
        ]
    }


@router.post("/triggers/run", status_code=202)
async def run_triggers_now(background_tasks: BackgroundTasks):
    background_tasks.add_task(run_expiration_triggers)
    return {"status": "scheduled"}
