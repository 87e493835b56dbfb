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

from src.timekeeper.timekeeper.database.bootstrap import apply_schema, ensure_admin_user, list_tables


def main() -> None:
    parser = argparse.ArgumentParser(description="Apply database/schema.sql and optionally create an admin account.")
    parser.add_argument("--admin-email")
    parser.add_argument("--admin-password")
    parser.add_argument("--admin-name", default="Administrator")
    args = parser.parse_args()

    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    schema_path = REPO_ROOT / "database" / "schema.sql"
    apply_schema(db_config, schema_path=schema_path)
    tables = list_tables(db_config)
    print(
        "OK: Applied schema.sql -> "
        f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')} "
        f"(tables={len(tables)})"
    )

    if args.admin_email and args.admin_password:
        ensure_admin_user(
            db_config,
            full_name=args.admin_name,
            email=args.admin_email,
            password=args.admin_password,
        )
        print(f"OK: Admin account ready ({args.admin_email})")


if __name__ == "__main__":
    main()
