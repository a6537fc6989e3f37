# seed.py
import argparse
import logging
import random
import time

from app.db.base import Base
from app.db.engine import engine, SessionLocal
from app.db.seed import seed_database, summarize

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

PRESETS = {
    "test": {"users": 10, "sleep_records": 50, "follows": 20},
    "development": {"users": 10_000, "sleep_records": 50_000, "follows": 20_000},
    "production": {"users": 1_000_000, "sleep_records": 5_000_000, "follows": 2_000_000},
}


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Seed the database with synthetic users, sleep records and follows.")
    parser.add_argument("--preset", choices=sorted(PRESETS), default="development")
    parser.add_argument("--users", type=int)
    parser.add_argument("--sleep-records", type=int)
    parser.add_argument("--follows", type=int)
    parser.add_argument("--batch-size", type=int, default=1_000)
    parser.add_argument("--seed", type=int, help="random seed for reproducible data")
    parser.add_argument("--verify-only", action="store_true", help="print the summary without seeding")
    return parser.parse_args(argv)


def main(argv=None) -> None:
    args = parse_args(argv)
    counts = dict(PRESETS[args.preset])
    for key in ("users", "sleep_records", "follows"):
        value = getattr(args, key)
        if value is not None:
            counts[key] = value

    Base.metadata.create_all(bind=engine)
    with SessionLocal() as db:
        if not args.verify_only:
            started = time.monotonic()
            inserted = seed_database(
                db,
                batch_size=args.batch_size,
                rng=random.Random(args.seed),
                **counts,
            )
            logger.info("Seeded %s in %.2fs", inserted, time.monotonic() - started)

        for key, value in summarize(db).items():
            logger.info("%s: %s", key, value)


if __name__ == "__main__":
    main()
