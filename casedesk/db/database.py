"""
Engine and session management for the assignment history store.

DATABASE_URL selects the store (SQLite file at the project root when unset);
DB_ECHO=true logs every statement.
"""

import os
from pathlib import Path
from typing import Generator, Optional
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session
from dotenv import load_dotenv

project_root = Path(__file__).parent.parent.parent
load_dotenv(project_root / ".env")

DATABASE_URL = os.getenv("DATABASE_URL", f"sqlite:///{project_root / 'casedesk.db'}")


def build_engine(url: str, echo: Optional[bool] = None, **kwargs) -> Engine:
    """Create an engine for `url`; SQLite connections may be shared across threads."""
    if echo is None:
        echo = os.getenv("DB_ECHO", "false").lower() == "true"
    connect_args = {"check_same_thread": False} if url.startswith("sqlite") else {}
    return create_engine(url, connect_args=connect_args, echo=echo, **kwargs)


engine = build_engine(DATABASE_URL)
SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)


def init_db(bind: Optional[Engine] = None):
    """Create the history tables on `bind` (the configured engine by default)."""
    from casedesk.db.models import Base
    Base.metadata.create_all(bind=bind or engine)


def get_session() -> Session:
    return SessionLocal()


def get_db() -> Generator[Session, None, None]:
    """FastAPI dependency: one session per request, closed afterwards."""
    with SessionLocal() as db:
        yield db
