from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from protrack.config import settings

_connect_args = {"check_same_thread": False} if settings.STATE_DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(settings.STATE_DATABASE_URL, connect_args=_connect_args, pool_pre_ping=True)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


def create_tables() -> None:
    from protrack import models  # noqa: F401

    Base.metadata.create_all(bind=engine)
