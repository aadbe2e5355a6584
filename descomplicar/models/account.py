from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import DateTime, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from descomplicar.db.database import Base
from descomplicar.models.base import TimestampMixin

if TYPE_CHECKING:
    from descomplicar.models.push_subscription import PushSubscription
    from descomplicar.models.subscription import Subscription
    from descomplicar.models.user import User


class Account(Base, TimestampMixin):
    """A dealership tenant. Owned by one user."""

    __tablename__ = "accounts"

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    # trial / active / inactive / cancelled / vencido
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="trial")
    trial_ends_at: Mapped[Optional[datetime]] = mapped_column(DateTime)
    deleted_at: Mapped[Optional[datetime]] = mapped_column(DateTime)

    user: Mapped["User"] = relationship(back_populates="accounts")
    subscriptions: Mapped[List["Subscription"]] = relationship(
        back_populates="account", order_by="Subscription.id"
    )
    push_subscriptions: Mapped[List["PushSubscription"]] = relationship(
        back_populates="account", order_by="PushSubscription.id"
    )

    def __repr__(self) -> str:
        return f"<Account {self.id}:{self.name} ({self.status})>"
