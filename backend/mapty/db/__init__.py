from mapty.db.session import engine, init_db, session_maker
from mapty.db.base import Base

__all__ = ["Base", "engine", "session_maker", "init_db"]
