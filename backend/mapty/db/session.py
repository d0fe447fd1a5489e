from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from mapty.config import settings
from mapty.db.base import Base

# SQLite connections are used from the event loop thread and the test client thread.
_connect_args = {"check_same_thread": False} if settings.database_url.startswith("sqlite") else {}

engine = create_engine(
    settings.database_url,
    echo=settings.debug,
    connect_args=_connect_args,
)
session_maker = sessionmaker(engine, class_=Session, expire_on_commit=False)


def init_db() -> None:
    import mapty.models  # noqa: F401 - register tables on Base.metadata

    Base.metadata.create_all(engine)
