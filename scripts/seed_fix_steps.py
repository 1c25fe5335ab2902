"""Seed fix-step articles from a JSON file.

The file holds a list of objects with the same fields as the create API:
``brand``, ``model``, ``error_code``, ``title``, ``content``, ``tags`` and
``media_urls``. Articles whose title already exists for the same
brand/model/error code are skipped.
"""

import argparse
import json
import os
import sys

from dotenv import load_dotenv
from pydantic import ValidationError

ROOT_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

from fastapi import HTTPException  # noqa: E402

from app.db import SessionLocal  # noqa: E402
from app.logging import configure_logging  # noqa: E402
from app.models.fix_step import FixStep  # noqa: E402
from app.schemas.fix_step import FixStepCreate  # noqa: E402
from app.services.fix_steps import fix_steps  # noqa: E402


def parse_args():
    parser = argparse.ArgumentParser(description="Seed fix steps from a JSON file.")
    parser.add_argument("--file", required=True, help="Path to a JSON list of fix steps")
    parser.add_argument("--created-by", default="seed", help="Value stored in created_by")
    return parser.parse_args()


def _exists(db, payload: FixStepCreate) -> bool:
    return (
        db.query(FixStep)
        .filter(FixStep.title == payload.title)
        .filter(FixStep.brand == payload.brand)
        .filter(FixStep.model == payload.model)
        .filter(FixStep.error_code == payload.error_code)
        .first()
        is not None
    )


def seed(db, records: list[dict], created_by: str) -> tuple[int, int]:
    created = 0
    skipped = 0
    for index, record in enumerate(records):
        try:
            payload = FixStepCreate.model_validate(record)
        except ValidationError as exc:
            print(f"Skipping record {index}: {exc.errors()[0]['msg']}")
            skipped += 1
            continue
        if _exists(db, payload):
            skipped += 1
            continue
        try:
            fix_steps.create(db, payload, created_by=created_by)
        except HTTPException as exc:
            print(f"Skipping record {index}: {exc.detail}")
            skipped += 1
            continue
        created += 1
    return created, skipped


def main():
    load_dotenv()
    configure_logging()
    args = parse_args()
    with open(args.file, encoding="utf-8") as handle:
        records = json.load(handle)
    if not isinstance(records, list):
        print("Expected a JSON list of fix steps")
        return 2
    db = SessionLocal()
    try:
        created, skipped = seed(db, records, args.created_by)
    finally:
        db.close()
    print(f"Seeded fix steps: created={created} skipped={skipped}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
