# backend/soc_analyst/db/base_class.py

from sqlalchemy import JSON
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import declarative_base

Base = declarative_base()

# JSONB on Postgres, plain JSON everywhere else (SQLite for local/tests)
JSONType = JSON().with_variant(JSONB(), "postgresql")
