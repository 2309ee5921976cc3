"""
Async database engine, session factory and declarative base.

The route store opens one session per call from AsyncSessionLocal, so
concurrent store calls never share a session.
"""
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker, declarative_base

from gym_catalog.config import settings

engine = create_async_engine(
    settings.DATABASE_URL,
    echo=settings.DB_ECHO,
    pool_size=settings.DB_POOL_SIZE,
    # Batch transitions may hold up to BATCH_MAX_CONCURRENCY sessions per request
    max_overflow=settings.DB_MAX_OVERFLOW,
    pool_pre_ping=True,
    pool_recycle=3600,
)

# Snapshots are built after commit, so loaded attributes must survive it
AsyncSessionLocal = sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)

Base = declarative_base()
