#!/usr/bin/env python3
"""
Seed demo providers, or import providers from CSV
Usage: python seed_providers.py [--csv providers.csv] [--no-reset]
"""

import argparse
import logging
import sys

from callbook.database import Database
from callbook.domain.providers.repository import ProviderRepository
from callbook.domain.providers.seed import import_providers_csv, reset_database, seed_demo_providers

logging.basicConfig(level=logging.INFO, format="%(message)s")
logger = logging.getLogger(__name__)


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Provision providers")
    parser.add_argument("--csv", help="CSV file with name,phone,serviceType,location,rating")
    parser.add_argument(
        "--no-reset", action="store_true", help="Keep existing appointments and providers"
    )
    args = parser.parse_args(argv)

    database = Database()
    database.init_db()
    db = database.session()
    try:
        logger.info("🌱 Seeding database...")
        if args.csv:
            if not args.no_reset:
                reset_database(db)
            import_providers_csv(db, args.csv)
        else:
            seed_demo_providers(db, reset=not args.no_reset)
        for provider in ProviderRepository.list_providers(db):
            logger.info(f"  - {provider.name} ({provider.service_type}) {provider.phone}")
        logger.info("🌱 Seeding complete!")
        return 0
    except Exception as e:
        logger.error(f"❌ Seeding failed: {e}")
        db.rollback()
        return 1
    finally:
        db.close()
        database.dispose()


if __name__ == "__main__":
    sys.exit(main())
