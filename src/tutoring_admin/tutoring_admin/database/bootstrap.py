"""Apply ``database/schema.sql`` and ``database/seed.sql`` to the configured MySQL server."""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterable, List

from .connection import DatabaseConnection, DBConfig

logger = logging.getLogger(__name__)

EXPECTED_TABLES = ("students", "courses", "lessons", "enrollments", "attendance", "email_logs")

# schema.sql names its own database; the configured one wins.
_DATABASE_DIRECTIVE = re.compile(r"(?im)^\s*(?:CREATE\s+DATABASE|USE)\b[^;]*;[ \t]*$")

_SQL_TOKEN = re.compile(
    r"""
      (?P<comment>--[^\n]*|/\*.*?\*/)
    | (?P<quoted>'(?:[^'\\]|\\.|'')*'|"(?:[^"\\]|\\.)*"|`[^`]*`)
    | (?P<end>;)
    | (?P<text>[^'"`;/-]+|.)
    """,
    re.VERBOSE | re.DOTALL,
)


def strip_database_directives(sql: str) -> str:
    return _DATABASE_DIRECTIVE.sub("", sql)


def split_statements(sql: str) -> Iterable[str]:
    """Yield statements split on ``;`` outside quotes, with comments dropped."""
    parts: List[str] = []
    for m in _SQL_TOKEN.finditer(sql):
        if m.lastgroup == "comment":
            continue
        if m.lastgroup == "end":
            stmt = "".join(parts).strip()
            parts = []
            if stmt:
                yield stmt
            continue
        parts.append(m.group())

    tail = "".join(parts).strip()
    if tail:
        yield tail


def load_script(path: str | Path) -> List[str]:
    return list(split_statements(strip_database_directives(Path(path).read_text(encoding="utf-8"))))


def _run_statements(config: DBConfig, statements: List[str]) -> None:
    conn = DatabaseConnection(config).connect()
    try:
        cur = conn.cursor()
        for stmt in statements:
            cur.execute(stmt)
        conn.commit()
    finally:
        conn.close()


def ensure_database_exists(db_config: dict) -> None:
    config = DBConfig.from_dict(db_config)
    conn = DatabaseConnection(config).connect(with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{config.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: str | Path) -> None:
    ensure_database_exists(db_config)
    statements = load_script(schema_path)
    _run_statements(DBConfig.from_dict(db_config), statements)
    logger.info("applied %s (%d statements)", Path(schema_path).name, len(statements))


def apply_seed_sql(db_config: dict, *, seed_path: str | Path) -> None:
    statements = load_script(seed_path)
    _run_statements(DBConfig.from_dict(db_config), statements)
    logger.info("applied %s (%d statements)", Path(seed_path).name, len(statements))


def list_tables(db_config: dict) -> list[str]:
    conn = DatabaseConnection(DBConfig.from_dict(db_config)).connect()
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()


def missing_tables(db_config: dict) -> list[str]:
    present = set(list_tables(db_config))
    return [t for t in EXPECTED_TABLES if t not in present]
