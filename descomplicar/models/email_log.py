from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, ForeignKey, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from descomplicar.db.database import Base


class EmailLog(Base):
    __tablename__ = "email_logs"

    id: Mapped[int] = mapped_column(primary_key=True)
    to: Mapped[str] = mapped_column(String(255), nullable=False)
    subject: Mapped[str] = mapped_column(String(500), nullable=False, default="")
    status: Mapped[str] = mapped_column(String(20), nullable=False)  # success / error
    error_message: Mapped[Optional[str]] = mapped_column(Text)
    origin: Mapped[str] = mapped_column(String(50), nullable=False, default="trigger")
    template_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("notification_templates.id")
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, server_default=func.now(), nullable=False
    )

    def __repr__(self) -> str:
        return f"<EmailLog to={self.to} {self.status}>"
