"""
Application startup validation and initialization.

This module performs the startup checks and table creation needed before the
reservation API serves requests.
"""

import logging
import sys
from typing import List, Tuple

from sqlalchemy import text
import sqlalchemy as sa

from core.config import get_settings
from core.database import engine, init_db
from modules.reservations.exceptions import ConfigError
from modules.reservations.services.table_inventory import get_table_inventory

logger = logging.getLogger(__name__)

REQUIRED_TABLES = ["reservations", "reservation_archive"]


class StartupValidator:
    """Validates application startup requirements"""

    def __init__(self):
        self.errors: List[str] = []
        self.warnings: List[str] = []

    def check_database_connection(self) -> bool:
        """Check database connectivity"""
        try:
            with engine.connect() as conn:
                conn.execute(text("SELECT 1")).fetchone()
            logger.info("Database connection successful")
            return True
        except sa.exc.SQLAlchemyError as e:
            self.errors.append(f"Database connection failed: {str(e)}")
            return False

    def check_required_tables(self) -> bool:
        """Create missing reservation tables"""
        existing_tables = sa.inspect(engine).get_table_names()
        missing_tables = [t for t in REQUIRED_TABLES if t not in existing_tables]
        if missing_tables:
            self.warnings.append(f"Creating missing tables: {', '.join(missing_tables)}")
            init_db()
        return True

    def validate_all(self) -> Tuple[bool, List[str], List[str]]:
        """Run all validation checks"""
        checks = [
            ("Database Connection", self.check_database_connection),
            ("Database Tables", self.check_required_tables),
        ]

        all_passed = True
        for check_name, check_func in checks:
            logger.info(f"Running check: {check_name}")
            try:
                if not check_func():
                    all_passed = False
            except sa.exc.SQLAlchemyError as e:
                self.errors.append(f"{check_name} check failed with error: {str(e)}")
                all_passed = False

        return all_passed, self.errors, self.warnings


def load_table_inventory():
    """Load the table inventory once; a bad layout stops the process."""
    try:
        return get_table_inventory()
    except ConfigError as e:
        logger.error(f"Invalid table inventory: {e.message}")
        raise


def run_startup_checks():
    """Run all startup validation checks"""
    settings = get_settings()
    logger.info("=" * 60)
    logger.info("Starting reservation backend")
    logger.info(f"Environment: {settings.environment}")
    logger.info("=" * 60)

    load_table_inventory()

    validator = StartupValidator()
    passed, errors, warnings = validator.validate_all()

    for warning in warnings:
        logger.warning(f"  {warning}")
    for error in errors:
        logger.error(f"  {error}")

    if not passed and settings.is_production:
        logger.error("Cannot start in production with errors!")
        sys.exit(1)
    elif not passed:
        logger.warning("Starting in development mode despite errors")
    else:
        logger.info("All startup checks passed")

    return passed, warnings


def configure_startup_logging():
    """Configure logging for startup"""
    logging.basicConfig(
        level=getattr(logging, get_settings().log_level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
