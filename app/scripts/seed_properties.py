from __future__ import annotations

import argparse
import asyncio
import json
import sys
from typing import Any

from sqlalchemy import inspect
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from app.core.config import settings
from app.models.listing import Listing

# store-managed columns are never taken from the file
_SKIP = {"id", "created_at", "updated_at"}


def listing_from_dict(item: dict[str, Any]) -> Listing:
    columns = {c.key for c in inspect(Listing).columns} - _SKIP
    unknown = set(item) - columns - _SKIP
    if unknown:
        raise ValueError(f"unknown listing fields: {sorted(unknown)}")
    return Listing(**{k: v for k, v in item.items() if k in columns})


async def load_listings(db: AsyncSession, items: list[dict[str, Any]]) -> int:
    db.add_all([listing_from_dict(i) for i in items])
    await db.commit()
    return len(items)


async def main() -> int:
    p = argparse.ArgumentParser(description="Load listings from a JSON file (local development only).")
    p.add_argument("--file", required=True, help="path to a JSON array of listing objects")
    args = p.parse_args()

    try:
        with open(args.file, "r", encoding="utf-8") as f:
            items = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        print(f"Failed to read JSON file: {e}", file=sys.stderr)
        return 2

    if not isinstance(items, list):
        print("Invalid payload: expected a JSON array.", file=sys.stderr)
        return 2

    engine = create_async_engine(settings.database_url, pool_pre_ping=True)
    Session = async_sessionmaker(engine, expire_on_commit=False)

    try:
        async with Session() as db:
            count = await load_listings(db, items)
    except ValueError as e:
        print(str(e), file=sys.stderr)
        return 2
    finally:
        await engine.dispose()

    print(f"Inserted {count} listings")
    return 0


if __name__ == "__main__":
    raise SystemExit(asyncio.run(main()))
