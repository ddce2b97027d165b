from __future__ import annotations

import logging
from contextlib import contextmanager
from enum import Enum
from typing import Any, Dict, List, Optional, Type, TypeVar

import mysql.connector
from mysql.connector import errorcode

from ..core.exceptions import PersistenceError, UniquenessViolation
from .connection import DatabaseConnection

logger = logging.getLogger(__name__)


def _translate(exc: mysql.connector.Error) -> PersistenceError:
    if exc.errno == errorcode.ER_DUP_ENTRY:
        return UniquenessViolation(str(exc))
    return PersistenceError(str(exc))


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    """Yield ``(conn, cursor)`` inside one transaction.

    Commits on success, rolls back on any error. Driver errors surface as
    ``PersistenceError`` (``UniquenessViolation`` for duplicate keys).
    """

    try:
        conn = conn_factory.connect()
    except mysql.connector.Error as e:
        raise _translate(e) from e

    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except mysql.connector.Error as e:
        conn.rollback()
        logger.debug("mysql error errno=%s: %s", e.errno, e)
        raise _translate(e) from e
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])


def as_bool(value: Any) -> bool:
    """MySQL BOOLEAN columns come back as 0/1."""
    return bool(int(value)) if value is not None else False


E = TypeVar("E", bound=Enum)


def stored_enum(enum_cls: Type[E], value: Any) -> E:
    """Decode an ENUM column; a value outside ``enum_cls`` is a store error."""
    try:
        return enum_cls(value)
    except ValueError as e:
        raise PersistenceError(f"Unexpected {enum_cls.__name__} value in store: {value!r}") from e
