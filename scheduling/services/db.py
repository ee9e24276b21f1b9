"""
db.py
-----
Persistence error wrapping for the scheduling services.

wrap_database_errors works both as a context manager and as a decorator:

    @wrap_database_errors("list_open_dates")
    def list_open_dates(self, ...):
        ...
"""

import logging
from contextlib import contextmanager

from django.db import DatabaseError

from ..exceptions import PersistenceError

logger = logging.getLogger(__name__)


@contextmanager
def wrap_database_errors(operation: str):
    """
    Re-raise django.db.DatabaseError as PersistenceError(operation).
    Must sit outside transaction.atomic() so the block has already rolled back.
    """
    try:
        yield
    except DatabaseError as exc:
        logger.exception("Database error during %s", operation)
        raise PersistenceError(operation) from exc
