"""SQLAlchemy engines for the sqlite backend, with WAL pragmas registered."""
from functools import lru_cache
from pathlib import Path

from sqlalchemy import event
from sqlalchemy.engine import Engine, make_url
from sqlmodel import SQLModel, create_engine

import cmsdash.infra.db.models  # noqa: F401   # registers the table mappers


def _set_wal_mode(dbapi_conn, _):
    cur = dbapi_conn.cursor()
    cur.execute("PRAGMA journal_mode=WAL")
    cur.execute("PRAGMA synchronous=NORMAL")
    cur.close()


def make_engine(url: str) -> Engine:
    parsed = make_url(url)
    if parsed.get_backend_name() != "sqlite":
        return create_engine(url, echo=False)

    if parsed.database and parsed.database != ":memory:":
        Path(parsed.database).parent.mkdir(parents=True, exist_ok=True)
    engine = create_engine(url, echo=False, connect_args={"check_same_thread": False})
    event.listen(engine, "connect", _set_wal_mode)
    return engine


@lru_cache(maxsize=None)
def get_engine(url: str) -> Engine:
    """One engine per database URL for the life of the process."""
    return make_engine(url)


def init_schema(engine: Engine) -> None:
    SQLModel.metadata.create_all(engine)
