from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from descomplicar.db.database import Base
from descomplicar.models.base import TimestampMixin

if TYPE_CHECKING:
    from descomplicar.models.account import Account
    from descomplicar.models.plan import Plan


class Subscription(Base, TimestampMixin):
    __tablename__ = "subscriptions"

    id: Mapped[int] = mapped_column(primary_key=True)
    account_id: Mapped[int] = mapped_column(ForeignKey("accounts.id"), nullable=False)
    plan_id: Mapped[Optional[int]] = mapped_column(ForeignKey("plans.id"))
    start_date: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    end_date: Mapped[Optional[datetime]] = mapped_column(DateTime)
    deleted_at: Mapped[Optional[datetime]] = mapped_column(DateTime)

    account: Mapped["Account"] = relationship(back_populates="subscriptions")
    plan: Mapped[Optional["Plan"]] = relationship()

    def __repr__(self) -> str:
        return f"<Subscription account={self.account_id} ends={self.end_date}>"
