"""Run the absence sweep once, outside the scheduler (e.g. to re-run a missed night)."""

from __future__ import annotations

import argparse
import importlib
import json
import logging
import sys
from datetime import datetime
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from dotenv import load_dotenv

from config import get_settings_module

from src.timekeeper.timekeeper.container import build_container


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--date", help="YYYY-MM-DD, defaults to today in the business timezone")
    args = parser.parse_args()

    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    logging.basicConfig(level=getattr(logging, getattr(settings, "LOG_LEVEL", "INFO"), logging.INFO))

    container = build_container(
        db_config=dict(settings.DB_CONFIG),
        timezone_name=getattr(settings, "BUSINESS_TIMEZONE", "Asia/Manila"),
    )
    day = datetime.strptime(args.date, "%Y-%m-%d").date() if args.date else None
    summary = container.absence_sweep_service.run(day)
    print(json.dumps(summary.to_dict(), indent=2))


if __name__ == "__main__":
    main()
