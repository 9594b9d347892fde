"""
Database health checks.
"""

import logging
from dataclasses import dataclass, field
from typing import List

from sqlalchemy import inspect, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from .models import REQUIRED_TABLES


logger = logging.getLogger(__name__)


@dataclass
class TableCheckResult:
    """Outcome of checking that the marketplace tables exist."""
    connected: bool
    present: List[str] = field(default_factory=list)
    missing: List[str] = field(default_factory=list)
    error: str = ""
    
    @property
    def healthy(self) -> bool:
        return self.connected and not self.missing


def check_required_tables(engine: Engine) -> TableCheckResult:
    """Verify the database is reachable and every required table exists."""
    try:
        with engine.connect() as connection:
            connection.execute(text("SELECT 1"))
        existing = set(inspect(engine).get_table_names())
    except SQLAlchemyError as e:
        logger.error(f"Database check failed: {str(e)}")
        return TableCheckResult(connected=False, missing=list(REQUIRED_TABLES), error=str(e))
    
    present = [table for table in REQUIRED_TABLES if table in existing]
    missing = [table for table in REQUIRED_TABLES if table not in existing]
    if missing:
        logger.warning(f"Missing tables: {', '.join(missing)}")
    return TableCheckResult(connected=True, present=present, missing=missing)
