from __future__ import annotations

import importlib
import logging
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.tutoring_admin.tutoring_admin.database.bootstrap import apply_seed_sql
from src.tutoring_admin.tutoring_admin.database.connection import DBConfig

logger = logging.getLogger("tutoring_admin.scripts.seed_db")


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    apply_seed_sql(db_config, seed_path=REPO_ROOT / "database" / "seed.sql")
    logger.info("seeded demo students, course and lessons on %s", DBConfig.from_dict(db_config).describe())


if __name__ == "__main__":
    main()
