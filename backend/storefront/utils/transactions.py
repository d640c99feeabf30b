from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.orm import Session

_DEPTH_KEY = "storefront.tx_depth"


@contextmanager
def smart_transaction(session: Session) -> Iterator[Session]:
    """
    Unit-of-work scope for a Session.

    The outermost scope owns the transaction: it adopts whatever the session
    autobegan for earlier reads, commits on success and rolls back on error.
    Scopes opened inside it get a SAVEPOINT (begin_nested) and never commit
    the outer work, so an engine call composed into another one stays atomic.
    Usage:
        with smart_transaction(db):
            ... DB work ...
    """
    depth = session.info.get(_DEPTH_KEY, 0)
    session.info[_DEPTH_KEY] = depth + 1
    try:
        if depth:
            with session.begin_nested():
                yield session
        else:
            try:
                yield session
                session.commit()
            except BaseException:
                session.rollback()
                raise
    finally:
        session.info[_DEPTH_KEY] = depth
