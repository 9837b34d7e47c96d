# backend/soc_analyst/db/session.py

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from soc_analyst.core.config import settings

# SQLite connections are shared across FastAPI's worker threads
connect_args = (
    {"check_same_thread": False}
    if settings.DATABASE_URL.startswith("sqlite")
    else {}
)

engine = create_engine(
    settings.DATABASE_URL,
    pool_pre_ping=True,
    connect_args=connect_args,
)

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)
