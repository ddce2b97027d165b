from __future__ import annotations

import importlib
import logging
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.tutoring_admin.tutoring_admin.database.bootstrap import apply_schema, list_tables, missing_tables
from src.tutoring_admin.tutoring_admin.database.connection import DBConfig

logger = logging.getLogger("tutoring_admin.scripts.init_db")


def main() -> int:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    apply_schema(db_config, schema_path=REPO_ROOT / "database" / "schema.sql")

    missing = missing_tables(db_config)
    if missing:
        logger.error("schema incomplete on %s, missing: %s", DBConfig.from_dict(db_config).describe(), ", ".join(missing))
        return 1
    logger.info("schema ready on %s (%s)", DBConfig.from_dict(db_config).describe(), ", ".join(sorted(list_tables(db_config))))
    return 0


if __name__ == "__main__":
    sys.exit(main())
