"""PostgreSQL client for executing read-only queries and reading table metadata"""
import logging
from typing import List, Dict, Any, Optional, Tuple
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine

from ..config import settings

logger = logging.getLogger(__name__)

COLUMNS_METADATA_SQL = """
SELECT column_name, data_type, is_nullable
FROM information_schema.columns
WHERE table_schema = current_schema() AND table_name = :table_name
ORDER BY ordinal_position
"""


class PostgresClient:
    """Client for the relational datastore behind the query pipeline"""

    def __init__(self, database_url: Optional[str] = None):
        self.database_url = database_url or settings.DATABASE_URL
        self.statement_timeout_ms = settings.DB_STATEMENT_TIMEOUT_MS
        self._engine: Optional[Engine] = None

    def get_engine(self) -> Engine:
        """
        Get or create the SQLAlchemy engine.

        Returns:
            SQLAlchemy engine
        """
        if self._engine is None:
            self._engine = create_engine(
                self.database_url,
                pool_pre_ping=True,
                connect_args={"options": f"-c statement_timeout={self.statement_timeout_ms}"},
            )
            logger.info("Created PostgreSQL engine")
        return self._engine

    def close(self):
        """Dispose of the engine and its pooled connections"""
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None

    def execute_query(self, sql: str) -> List[Dict[str, Any]]:
        """
        Execute SQL text once and return rows as dictionaries.

        Args:
            sql: SQL query to execute, passed through unchanged

        Returns:
            List of row dictionaries in datastore order

        Raises:
            sqlalchemy.exc.SQLAlchemyError: If the query fails
        """
        logger.info(f"Executing PostgreSQL query: {sql[:200]}")

        with self.get_engine().connect() as conn:
            # Raw driver execution: no bind-parameter or percent-sign parsing
            result = conn.execution_options(no_parameters=True).exec_driver_sql(sql)
            rows = [dict(row) for row in result.mappings()]

        logger.info(f"Query returned {len(rows)} rows")
        return rows

    def get_table_columns(self, table_name: str) -> List[Tuple[str, str, bool]]:
        """
        Get (column_name, data_type, nullable) triples for a table.

        Args:
            table_name: Unqualified table name in the current schema

        Returns:
            Column triples in ordinal order (empty if the table is unknown)
        """
        with self.get_engine().connect() as conn:
            result = conn.execute(text(COLUMNS_METADATA_SQL), {"table_name": table_name})
            return [
                (row.column_name, row.data_type, row.is_nullable == "YES")
                for row in result
            ]

    def test_connection(self) -> bool:
        """
        Test PostgreSQL connection.

        Returns:
            True if connection successful, False otherwise
        """
        try:
            with self.get_engine().connect() as conn:
                return conn.execute(text("SELECT 1")).scalar() == 1
        except Exception as e:
            logger.error(f"PostgreSQL connection test failed: {e}")
            return False


# Global client instance
_client: Optional[PostgresClient] = None


def get_postgres_client() -> PostgresClient:
    """Get global PostgreSQL client instance"""
    global _client
    if _client is None:
        _client = PostgresClient()
    return _client
