from __future__ import annotations

import time
from collections.abc import Iterator

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from core.config import settings


class DatabaseUnavailableError(RuntimeError):
    """The database could not be reached for a request (after the ping retries)."""


# Delay before each extra connectivity ping in get_db.
PING_RETRY_DELAYS: tuple[float, ...] = (0.2, 0.5, 1.0)

# Lower-cased fragments of driver messages that mean "try again later".
_TRANSIENT_MARKERS: tuple[str, ...] = (
    "getaddrinfo failed",
    "could not translate host name",
    "name or service not known",
    "connection refused",
    "actively refused",
    "connection reset",
    "server closed the connection unexpectedly",
    "timeout",
    "timed out",
)

_PG_SCHEMES = ("postgresql://", "postgres://", "postgresql+psycopg://")


def _exception_chain(exc: BaseException) -> Iterator[BaseException]:
    seen: set[int] = set()
    cur: BaseException | None = exc
    while cur is not None and id(cur) not in seen:
        seen.add(id(cur))
        yield cur
        cur = cur.__cause__ or cur.__context__


def is_transient_db_connectivity_error(exc: BaseException) -> bool:
    """True when any exception in the cause chain reads like a lost or refused connection.

    Wrapped storage errors (``InternalError`` raised ``from`` a driver error)
    are recognised too. Constraint and SQL errors never are.
    """

    text_ = "\n".join(str(e).lower() for e in _exception_chain(exc))
    return any(marker in text_ for marker in _TRANSIENT_MARKERS)


def normalize_database_url(raw: str) -> str:
    """Point bare Postgres URLs at the psycopg2 dialect; leave anything else alone."""

    url = raw.strip()
    for scheme in _PG_SCHEMES:
        if url.startswith(scheme):
            return "postgresql+psycopg2://" + url[len(scheme):]
    return url


def _enable_sqlite_foreign_keys(dbapi_connection, _record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def get_engine(database_url: str | None = None) -> Engine:
    url = normalize_database_url(database_url or settings.database_url)

    if url.startswith("sqlite"):
        # Request handlers run in a threadpool; an in-memory database must keep one connection.
        kwargs: dict[str, object] = {"connect_args": {"check_same_thread": False}}
        if make_url(url).database in (None, "", ":memory:"):
            kwargs["poolclass"] = StaticPool
        engine = create_engine(url, **kwargs)
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
        return engine

    # connect_timeout keeps an outage from hanging requests and /health.
    return create_engine(url, pool_pre_ping=True, connect_args={"connect_timeout": 3})


ENGINE = get_engine()
SessionLocal = sessionmaker(bind=ENGINE, autoflush=False, autocommit=False, expire_on_commit=False)


def get_db() -> Iterator[Session]:
    """Request-scoped session.

    Only the connectivity ping is retried; the request's own work never is.
    """

    last_exc: OperationalError | None = None
    for attempt in range(len(PING_RETRY_DELAYS) + 1):
        db = SessionLocal()
        try:
            db.execute(text("SELECT 1"))
        except OperationalError as exc:
            last_exc = exc
            db.close()
            if not is_transient_db_connectivity_error(exc) or attempt == len(PING_RETRY_DELAYS):
                break
            time.sleep(PING_RETRY_DELAYS[attempt])
            continue

        # Kept outside the ping's try block so domain errors keep their own status.
        try:
            yield db
        finally:
            db.close()
        return

    raise DatabaseUnavailableError("Database temporarily unavailable") from last_exc
