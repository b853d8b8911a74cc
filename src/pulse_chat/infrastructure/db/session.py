from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from pulse_chat.config import settings

# No connection is opened until the first session checkout.
engine = create_async_engine(
    settings.database_url,
    pool_size=settings.DB_POOL_SIZE,
    max_overflow=settings.DB_MAX_OVERFLOW,
    pool_recycle=settings.DB_POOL_RECYCLE,
    pool_pre_ping=True,
    echo=settings.DB_ECHO,
    # created_at / seen_at / last_seen are compared and returned in UTC.
    connect_args={"server_settings": {"application_name": "pulse-chat", "timezone": "UTC"}},
)

# Entities are mapped out of the session before commit; nothing is read lazily after.
AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)
