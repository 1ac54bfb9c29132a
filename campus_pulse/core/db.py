"""
Database engine and session factory for durable storage
"""

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from campus_pulse.core.config import settings

# check_same_thread is needed only for SQLite
if settings.DATABASE_URL.startswith("sqlite"):
    engine = create_engine(
        settings.DATABASE_URL,
        connect_args={"check_same_thread": False}
    )
else:
    engine = create_engine(settings.DATABASE_URL, pool_pre_ping=True)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()
