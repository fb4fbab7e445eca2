from typing import Any, Dict, List, Optional
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from fastapi import Request
from app.config import Settings
from app.core.errors import StoreError
from app.core.logging import get_logger
from app.models.database import metadata

logger = get_logger(__name__)


def build_engine(settings: Settings) -> Engine:
    """Create the pooled engine from settings."""
    url = settings.get_database_url()
    options = {"pool_pre_ping": True, "echo": settings.debug}
    if not url.startswith("sqlite"):
        options.update(pool_size=settings.db_pool_size, max_overflow=settings.db_pool_size * 2)
    return create_engine(url, **options)


class QueryGateway:
    """Runs parameterized SQL against a pooled engine.

    Every call checks out a connection, runs one statement inside its own
    transaction and hands the connection back to the pool.
    """

    def __init__(self, engine: Engine):
        self.engine = engine

    def query(self, statement: str, params: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        """Execute ``statement`` with bound ``params`` and return rows as dicts."""
        try:
            with self.engine.begin() as conn:
                result = conn.execute(text(statement), params or {})
                if not result.returns_rows:
                    return []
                return [dict(row) for row in result.mappings().all()]
        except SQLAlchemyError as e:
            logger.error("Database query failed", statement=statement, error=str(e))
            raise StoreError(str(e)) from e

    def create_tables(self) -> None:
        """Create the products table if it does not exist yet."""
        try:
            metadata.create_all(bind=self.engine, checkfirst=True)
        except SQLAlchemyError as e:
            raise StoreError(str(e)) from e

    def check_connection(self) -> bool:
        """Check database connectivity (logs only errors)."""
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1")).fetchone()
            return True
        except SQLAlchemyError as e:
            logger.error("Database connection failed", error=str(e))
            return False

    def dispose(self) -> None:
        self.engine.dispose()


def get_gateway(request: Request) -> QueryGateway:
    """Dependency returning the gateway built at startup."""
    return request.app.state.gateway
