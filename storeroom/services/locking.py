"""
Transaction boundary for every Storeroom mutation.

locked_transaction() opens transaction.atomic(), applies the configured
lock timeout and turns lock timeouts, deadlocks and serialization failures
into a retryable CONTENTION error. Other database errors propagate as they
are.
"""

import logging
from contextlib import contextmanager

from django.db import DEFAULT_DB_ALIAS, OperationalError, connections, transaction

from storeroom.conf import storeroom_settings
from storeroom.exceptions import StockError

logger = logging.getLogger('storeroom')

# PostgreSQL SQLSTATEs: serialization_failure, deadlock_detected, lock_not_available
CONTENTION_SQLSTATES = frozenset({'40001', '40P01', '55P03'})


def is_contention(exc: BaseException) -> bool:
    """Is this database error a lock/serialization conflict?"""
    cause = exc.__cause__
    sqlstate = getattr(cause, 'sqlstate', None) or getattr(cause, 'pgcode', None)
    if sqlstate in CONTENTION_SQLSTATES:
        return True
    # SQLite reports busy writers as a plain OperationalError
    return 'database is locked' in str(exc)


def _apply_lock_timeout(using):
    timeout = storeroom_settings.LOCK_TIMEOUT_MS
    connection = connections[using]
    if timeout and connection.vendor == 'postgresql':
        with connection.cursor() as cursor:
            cursor.execute("SET LOCAL lock_timeout = %s", [f"{int(timeout)}ms"])


@contextmanager
def locked_transaction(error_class=StockError, using=DEFAULT_DB_ALIAS, **context):
    """
    Atomic block for a read-modify-write under row locks.

    Args:
        error_class: BaseError subclass raised on contention
        context: Extra data attached to the CONTENTION error
    """
    try:
        with transaction.atomic(using=using):
            _apply_lock_timeout(using)
            yield
    except OperationalError as exc:
        if not is_contention(exc):
            raise
        logger.warning(
            "storeroom.contention",
            extra={"error": str(exc), **context},
        )
        raise error_class('CONTENTION', **context) from exc
