#!/usr/bin/env python3
"""
Database initialization script for Smart Inventory deployments.

Checks connectivity and creates the products table if it is missing.
The API does the same on startup; this script lets the schema be prepared
before the first server start.

Usage:
    python scripts/init_database.py

Environment Variables:
    DATABASE_URL - full SQLAlchemy URL (optional)
    DB_HOST, DB_PORT, DB_USER, DB_PASSWORD, DB_NAME - used when DATABASE_URL is unset
"""

import os
import sys

# Add parent directory to path to import app modules
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app.config import settings
from app.core.errors import StoreError
from app.core.logging import get_logger, setup_logging
from app.db.database import QueryGateway, build_engine
from app.db.repository import ProductRepository

logger = get_logger("init_database")


def main() -> int:
    setup_logging(settings.log_level, settings.log_format)
    gateway = QueryGateway(build_engine(settings))

    try:
        if not gateway.check_connection():
            logger.error("Cannot reach database", host=settings.db_host, database=settings.db_name)
            return 1

        gateway.create_tables()
        total = ProductRepository(gateway).count_products()
        logger.info("products table ready", products=total)
        return 0
    except StoreError as e:
        logger.error("Database initialization failed", error=e.message)
        return 1
    finally:
        gateway.dispose()


if __name__ == "__main__":
    sys.exit(main())
