"""Database handle and session dependency.

`Database` owns the SQLModel/SQLAlchemy engine for one process. The
application opens it in its lifespan, stores it on `app.state.db` and
disposes it at shutdown; request handlers obtain sessions through
`get_session`. Tables are created from the SQLModel metadata; there is
no migration tooling.
"""

import logging

from fastapi import Request
from sqlmodel import SQLModel, create_engine, Session

from . import models  # noqa: F401  registers tables on SQLModel.metadata

logger = logging.getLogger("eduportal.database")


class Database:
    """An explicitly opened relational storage handle."""

    def __init__(self, url: str, echo: bool = False):
        self.url = url
        connect_args = {"check_same_thread": False} if url.startswith("sqlite") else {}
        self.engine = create_engine(url, echo=echo, connect_args=connect_args)

    def create_tables(self):
        """Create any missing tables from the model metadata."""
        SQLModel.metadata.create_all(self.engine)

    def session(self) -> Session:
        return Session(self.engine)

    def dispose(self):
        self.engine.dispose()
        logger.info("database engine disposed")


def open_database(url: str) -> Database:
    """Create the engine and make sure the schema exists."""
    db = Database(url)
    db.create_tables()
    logger.info("connected to database %s", db.engine.url.render_as_string(hide_password=True))
    return db


def get_session(request: Request):
    """Yield a database `Session` for FastAPI dependency injection.

    The generator yields a session bound to the application's database
    handle and closes it when the request scope finishes.
    """
    db: Database = request.app.state.db
    with db.session() as session:
        yield session
