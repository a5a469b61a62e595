#!/usr/bin/env python3
"""
Document Store Initialization Script
====================================

Create the MongoDB indexes the warranty registry relies on and optionally
seed a demo seller with one issued warranty.

Usage:
    python scripts/init_store.py
    python scripts/init_store.py --seed

Version: 0.1.0
"""

import argparse
import asyncio
import sys
from datetime import UTC, datetime
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from pymongo.errors import PyMongoError

from shared.logging import get_logger, setup_logging

setup_logging(log_level="INFO", json_logs=False, service_name="init-store")
logger = get_logger(__name__)


async def init_mongodb() -> bool:
    """Verify the connection and create indexes."""
    from shared.database import MongoDBClient

    logger.info("Initializing MongoDB...")

    try:
        client = MongoDBClient.get_client()
        await MongoDBClient.create_indexes()

        info = await client.server_info()
        logger.info("mongodb_connected", version=info["version"])
        return True

    except PyMongoError as e:
        logger.error("mongodb_init_failed", error=str(e))
        return False


async def seed_data() -> bool:
    """Create a demo seller profile and one unclaimed warranty."""
    from services.warranty.errors import WarrantyError
    from services.warranty.lifecycle import WarrantyLifecycle
    from services.warranty.models import IssueRequest, Principal
    from services.warranty.sellers import SellerDirectory
    from services.warranty.store import MongoDocumentStore
    from shared.database import MongoDBClient

    store = MongoDocumentStore(MongoDBClient.get_database())
    seller = Principal(uid="demo-seller", email="demo@example.com", display_name="Demo Store")

    try:
        await SellerDirectory(store).complete_onboarding(
            seller, {"business_name": "Demo Store", "business_type": "electronics"}
        )
        record = await WarrantyLifecycle(store).issue(
            seller,
            IssueRequest(
                product_model="Demo Phone X",
                serial_number="DEMO-0001",
                purchase_date=datetime.now(UTC).date(),
                duration_months=12,
                customer_name="Demo Customer",
            ),
        )
    except WarrantyError as e:
        logger.error("seed_failed", error=str(e))
        return False

    logger.info("seed_completed", code=record.code)
    return True


async def main(args: argparse.Namespace) -> int:
    """Main initialization function."""
    from shared.database import MongoDBClient

    results = {"MongoDB": await init_mongodb()}
    if args.seed and results["MongoDB"]:
        results["Seed Data"] = await seed_data()

    await MongoDBClient.close()

    failed = [name for name, success in results.items() if not success]
    for name, success in results.items():
        logger.info("init_step", step=name, ok=success)

    if failed:
        logger.error("init_failed", failed=failed)
        return 1

    logger.info("init_completed")
    return 0


def parse_args() -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="Initialize the warranty document store")
    parser.add_argument(
        "--seed",
        action="store_true",
        help="Seed a demo seller and warranty",
    )
    return parser.parse_args()


if __name__ == "__main__":
    args = parse_args()
    exit_code = asyncio.run(main(args))
    sys.exit(exit_code)
