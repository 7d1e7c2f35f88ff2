"""Database engine/session helpers."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from typing import TypeVar

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from models import Base

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Advisory lock guarding the whole rating state: recompute takes it exclusively,
# result recording takes it shared.
RATING_STATE_LOCK_KEY = 7_263_511


def create_db_engine(db_url: str) -> Engine:
    """Create a SQLAlchemy engine with conservative defaults for scripts."""
    if db_url.startswith("sqlite") and ":memory:" in db_url:
        return create_engine(
            db_url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
            future=True,
        )
    return create_engine(db_url, pool_pre_ping=True, future=True)


def create_session_factory(engine: Engine) -> sessionmaker[Session]:
    """Create a session factory bound to the provided engine."""
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False, future=True)


def ensure_schema(engine: Engine) -> None:
    """Create all tables and indexes when missing."""
    Base.metadata.create_all(bind=engine, checkfirst=True)


def acquire_rating_state_lock(session: Session, *, exclusive: bool) -> None:
    """Take the transaction-scoped rating-state lock on PostgreSQL.

    Other backends rely on their own transaction isolation.
    """
    bind = session.get_bind()
    if bind is None or bind.dialect.name != "postgresql":
        return
    function_name = "pg_advisory_xact_lock" if exclusive else "pg_advisory_xact_lock_shared"
    session.execute(text(f"SELECT {function_name}(:key)"), {"key": RATING_STATE_LOCK_KEY})


def run_in_transaction(
    session_factory: Callable[[], Session],
    work: Callable[[Session], T],
    *,
    attempts: int = 3,
    retry_delay_seconds: float = 0.05,
    commit: bool = True,
) -> T:
    """Run ``work`` in one transaction, retrying the whole transaction on transient failures.

    Only ``OperationalError`` (lost connections, serialization failures, deadlocks)
    is retried; every other exception rolls back and propagates unchanged.
    """
    if attempts <= 0:
        raise ValueError("attempts must be greater than 0")

    for attempt in range(1, attempts + 1):
        with session_factory() as session:
            try:
                result = work(session)
                if commit:
                    session.commit()
                else:
                    session.rollback()
                return result
            except OperationalError as exc:
                session.rollback()
                if attempt >= attempts:
                    raise
                logger.warning(
                    "transient database failure attempt=%d/%d error=%s",
                    attempt,
                    attempts,
                    exc.orig,
                )
            except Exception:
                session.rollback()
                raise
        time.sleep(retry_delay_seconds * attempt)

    raise RuntimeError("unreachable: transaction retry loop exited without a result")
