from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import DateTime, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from descomplicar.db.database import Base
from descomplicar.models.base import TimestampMixin

if TYPE_CHECKING:
    from descomplicar.models.account import Account


class User(Base, TimestampMixin):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    deleted_at: Mapped[Optional[datetime]] = mapped_column(DateTime)

    accounts: Mapped[List["Account"]] = relationship(
        back_populates="user", order_by="Account.id"
    )

    def __repr__(self) -> str:
        return f"<User {self.email}>"
