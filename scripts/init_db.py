"""Create the time clock database and apply database/schema.sql.

Usage: python scripts/init_db.py [--env testing] [--schema path/to/schema.sql]
"""

from __future__ import annotations

import argparse
import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from dotenv import load_dotenv

from config import get_settings_module

from src.pos_timeclock.pos_timeclock.database.bootstrap import apply_schema, list_tables
from src.pos_timeclock.pos_timeclock.main import SCHEMA_PATH, configure_logging

EVENTS_TABLE = "time_clock_events"


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--env", help="settings to use instead of APP_ENV")
    parser.add_argument("--schema", type=Path, default=SCHEMA_PATH, help="schema file to apply")
    args = parser.parse_args(argv)

    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module(args.env))
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))
    db_config = dict(settings.DB_CONFIG)

    statements = apply_schema(db_config, schema_path=args.schema)
    tables = list_tables(db_config)
    target = f"{db_config.get('user')}@{db_config.get('host')}/{db_config.get('database')}"
    if EVENTS_TABLE not in tables:
        print(f"FAILED: {EVENTS_TABLE} missing in {target} after {statements} statements", file=sys.stderr)
        return 1

    print(f"OK: {target} ready ({statements} statements, tables: {', '.join(sorted(tables))})")
    return 0


if __name__ == "__main__":
    sys.exit(main())
