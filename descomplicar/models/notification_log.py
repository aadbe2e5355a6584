from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from sqlalchemy import Boolean, Date, DateTime, Enum, ForeignKey, Index, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from descomplicar.db.database import Base
from descomplicar.models.notification_template import NotificationTrigger, TemplateChannel


class NotificationTemplateUsageLog(Base):
    """Append-only record of every template send attempt."""

    __tablename__ = "notification_template_usage_logs"
    __table_args__ = (
        Index(
            "ix_template_usage_dedup",
            "template_id",
            "account_id",
            "trigger_date",
        ),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    template_id: Mapped[int] = mapped_column(
        ForeignKey("notification_templates.id"), nullable=False
    )
    trigger: Mapped[NotificationTrigger] = mapped_column(
        Enum(NotificationTrigger), nullable=False
    )
    channel: Mapped[TemplateChannel] = mapped_column(
        Enum(TemplateChannel), nullable=False
    )
    account_id: Mapped[Optional[int]] = mapped_column(ForeignKey("accounts.id"))
    recipient_info: Mapped[str] = mapped_column(String(500), nullable=False)
    # Brazil calendar day the trigger ran for
    trigger_date: Mapped[date] = mapped_column(Date, nullable=False)
    success: Mapped[bool] = mapped_column(Boolean, nullable=False)
    error_message: Mapped[Optional[str]] = mapped_column(Text)
    sent_at: Mapped[datetime] = mapped_column(
        DateTime, server_default=func.now(), nullable=False
    )

    def __repr__(self) -> str:
        status = "ok" if self.success else "failed"
        return (
            f"<NotificationTemplateUsageLog {self.trigger.value} "
            f"template={self.template_id} {self.recipient_info} "
            f"via {self.channel.value} {status}>"
        )
