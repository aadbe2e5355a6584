from __future__ import annotations

import enum
from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, DateTime, Enum, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from descomplicar.db.database import Base
from descomplicar.models.base import TimestampMixin


class NotificationTrigger(enum.Enum):
    welcome = "welcome"
    subscription_expiring = "subscription_expiring"
    subscription_expired = "subscription_expired"


# Triggers fired by the daily expiration scan, matched against days_offset.
EXPIRATION_TRIGGERS = (
    NotificationTrigger.subscription_expiring,
    NotificationTrigger.subscription_expired,
)


class TemplateChannel(enum.Enum):
    email = "email"
    pwa = "pwa"


class NotificationTemplate(Base, TimestampMixin):
    __tablename__ = "notification_templates"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    trigger: Mapped[NotificationTrigger] = mapped_column(
        Enum(NotificationTrigger), nullable=False
    )
    channel: Mapped[TemplateChannel] = mapped_column(
        Enum(TemplateChannel), nullable=False
    )
    # Signed: negative = days before expiry, positive = days after expiry
    days_offset: Mapped[Optional[int]] = mapped_column(Integer)
    subject: Mapped[Optional[str]] = mapped_column(String(500))
    title: Mapped[Optional[str]] = mapped_column(String(255))
    body: Mapped[str] = mapped_column(Text, nullable=False)
    active: Mapped[bool] = mapped_column(Boolean, default=True)
    deleted_at: Mapped[Optional[datetime]] = mapped_column(DateTime)

    def __repr__(self) -> str:
        return (
            f"<NotificationTemplate {self.trigger.value} "
            f"offset={self.days_offset} via {self.channel.value}>"
        )
