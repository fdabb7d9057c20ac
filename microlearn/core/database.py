import logging
from typing import Iterator

from fastapi import Request
from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session, sessionmaker

from microlearn.models.orm import Base

logger = logging.getLogger(__name__)


def _enable_sqlite_foreign_keys(dbapi_conn, _record):
    cur = dbapi_conn.cursor()
    cur.execute("PRAGMA foreign_keys=ON")
    cur.close()


class Database:
    """Engine + session factory owned by the process entry point."""

    def __init__(self, url: str, echo: bool = False):
        self.url = url
        self.engine = create_engine(url, echo=echo, future=True, pool_pre_ping=True)
        if self.engine.dialect.name == "sqlite":
            event.listen(self.engine, "connect", _enable_sqlite_foreign_keys)
        self.SessionLocal = sessionmaker(bind=self.engine, autocommit=False, autoflush=False, future=True)

    def create_all(self) -> None:
        Base.metadata.create_all(self.engine)
        logger.info("Schema ready on %s", self.engine.url.render_as_string(hide_password=True))

    def session(self) -> Session:
        return self.SessionLocal()

    def dispose(self) -> None:
        self.engine.dispose()


def get_db(request: Request) -> Iterator[Session]:
    db = request.app.state.db.session()
    try:
        yield db
    finally:
        db.close()
