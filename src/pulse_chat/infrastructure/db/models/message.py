from __future__ import annotations

from datetime import datetime

from sqlalchemy import BigInteger, Boolean, CheckConstraint, ForeignKey, Identity, Index, Text
from sqlalchemy import text as sql_text
from sqlalchemy.dialects.postgresql import TIMESTAMP
from sqlalchemy.orm import Mapped, mapped_column

from pulse_chat.infrastructure.db.base import Base


class MessageModel(Base):
    __tablename__ = "messages"

    # Identity gives a monotonic insertion order used to break created_at ties.
    id: Mapped[int] = mapped_column(BigInteger, Identity(), primary_key=True)
    sender_id: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    receiver_id: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    text: Mapped[str | None] = mapped_column(Text, nullable=True)
    image: Mapped[str | None] = mapped_column(Text, nullable=True)
    seen: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=sql_text("false"),
    )
    seen_at: Mapped[datetime | None] = mapped_column(TIMESTAMP(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        server_default=sql_text("now()"),
    )

    __table_args__ = (
        CheckConstraint(
            "text IS NOT NULL OR image IS NOT NULL",
            name="ck_messages_has_content",
        ),
        Index("ix_messages_pair_timeline", "sender_id", "receiver_id", "created_at", "id"),
        Index("ix_messages_receiver_unseen", "receiver_id", "seen"),
    )
