from contextlib import contextmanager

from sqlalchemy import text

from models import db


@contextmanager
def transaction():
    """
    Unit of work on the request-scoped session.

    Commits when the block exits cleanly; on any exception the session is
    rolled back before the exception propagates. The connection goes back to
    the pool when the app context tears the session down.
    """
    try:
        yield db.session
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise


def query(sql, params=None):
    """Run a parameterized textual statement and return all rows."""
    return db.session.execute(text(sql), params or {}).all()
