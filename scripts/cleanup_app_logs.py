"""Delete application log rows older than the retention window."""

import argparse
import os
import sys

from dotenv import load_dotenv

ROOT_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

from app.config import settings  # noqa: E402
from app.db import SessionLocal  # noqa: E402
from app.logging import configure_logging  # noqa: E402
from app.services import app_logs  # noqa: E402


def parse_args():
    parser = argparse.ArgumentParser(description="Delete app logs older than N days.")
    parser.add_argument(
        "--days",
        type=int,
        default=settings.log_retention_days,
        help="Retention window in days (default: %(default)s)",
    )
    return parser.parse_args()


def main():
    load_dotenv()
    configure_logging()
    args = parse_args()
    if args.days < 0:
        print("--days must be zero or greater")
        return 2
    db = SessionLocal()
    try:
        ok = app_logs.delete_old_logs(db, days=args.days)
    finally:
        db.close()
    if ok:
        print(f"Deleted app logs older than {args.days} days.")
        return 0
    print("Log cleanup failed; see logs for details.")
    return 1


if __name__ == "__main__":
    sys.exit(main())
