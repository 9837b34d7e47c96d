# backend/soc_analyst/db/init_db.py
import logging

from sqlalchemy.engine import Engine

from soc_analyst.db.session import engine
from soc_analyst.db.base_class import Base

# Registers the event, session and message tables on Base.metadata
from soc_analyst import models  # noqa: F401

logger = logging.getLogger(__name__)


def init_db(bind: Engine = engine, reset: bool = False) -> None:
    """
    Create the event corpus and conversation tables if they are missing.
    With `reset=True` existing tables (and their rows) are dropped first.
    """
    if reset:
        logger.warning("Dropping analyst tables on %s", bind.url.render_as_string())
        Base.metadata.drop_all(bind=bind)
    Base.metadata.create_all(bind=bind)
    logger.info("Analyst tables ready: %s", ", ".join(sorted(Base.metadata.tables)))
