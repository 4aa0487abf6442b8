"""Schema descriptors and table naming for prompt grounding"""
import logging
import re
import time
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError

from ..config import settings
from ..exceptions import ExecutionError, TargetMissing
from ..models import SchemaColumn, SchemaDescriptor
from ..services.postgres_client import PostgresClient, get_postgres_client

logger = logging.getLogger(__name__)

# Token the model writes in place of an uploaded table's name
TABLE_PLACEHOLDER = "__UPLOADED_TABLE__"

UPLOAD_TABLE_PREFIX = "csv_data_"

_IDENTIFIER_RE = re.compile(r"^[a-z_][a-z0-9_]{0,62}$")

PLACEMENTS_SCHEMA = SchemaDescriptor(
    table_name=settings.DEFAULT_TABLE,
    columns=(
        SchemaColumn(name="id", type="integer", nullable=False),
        SchemaColumn(name="name", type="text", nullable=False),
        SchemaColumn(name="dob", type="date"),
        SchemaColumn(name="cpi", type="decimal"),
        SchemaColumn(name="tenth_percentage", type="decimal"),
        SchemaColumn(name="twelfth_percentage", type="decimal"),
        SchemaColumn(name="company_placed", type="text"),
        SchemaColumn(name="package_lpa", type="decimal"),
        SchemaColumn(name="department", type="text"),
        SchemaColumn(name="role", type="text"),
        SchemaColumn(name="location", type="text"),
        SchemaColumn(name="internship_done", type="boolean"),
        SchemaColumn(name="rounds_cleared", type="integer"),
    ),
)

# Checked in order; first prefix match wins
_TYPE_PREFIXES = (
    ("interval", "text"),
    ("int", "integer"),
    ("bigint", "integer"),
    ("smallint", "integer"),
    ("serial", "integer"),
    ("bigserial", "integer"),
    ("numeric", "decimal"),
    ("decimal", "decimal"),
    ("real", "decimal"),
    ("double", "decimal"),
    ("float", "decimal"),
    ("money", "decimal"),
    ("bool", "boolean"),
    ("date", "date"),
    ("timestamp", "date"),
)


def map_sql_type(data_type: str) -> str:
    """
    Map a datastore type name to a descriptor column type.

    Args:
        data_type: Type as reported by information_schema or written in DDL
            (e.g. 'integer', 'numeric', 'DECIMAL(10,2)', 'character varying')

    Returns:
        One of integer, decimal, boolean, date, text
    """
    normalized = (data_type or "").strip().lower()
    for prefix, column_type in _TYPE_PREFIXES:
        if normalized.startswith(prefix):
            return column_type
    return "text"


def describe_table(table_name: str, client: Optional[PostgresClient] = None) -> SchemaDescriptor:
    """
    Fetch the column list of a table from the datastore.

    Args:
        table_name: Unqualified table name
        client: Datastore client (defaults to the global client)

    Returns:
        Schema descriptor in ordinal column order

    Raises:
        TargetMissing: If the table has no columns (does not exist)
        ExecutionError: If the metadata lookup fails
    """
    validate_table_identifier(table_name)
    client = client or get_postgres_client()

    try:
        triples = client.get_table_columns(table_name)
    except SQLAlchemyError as e:
        logger.exception(f"Metadata lookup failed for {table_name}")
        raise ExecutionError(f"Failed to read schema for table '{table_name}': {e}") from e

    if not triples:
        raise TargetMissing(f"Table '{table_name}' does not exist", relation=table_name)

    columns = tuple(
        SchemaColumn(name=name, type=map_sql_type(data_type), nullable=nullable)
        for name, data_type, nullable in triples
    )
    logger.info(f"Described table {table_name}: {len(columns)} columns")
    return SchemaDescriptor(table_name=table_name, columns=columns)


def validate_table_identifier(table_name: str) -> str:
    """
    Ensure a table name is a plain lower-case SQL identifier.

    Raises:
        ValueError: If the name contains anything outside [a-z0-9_]
    """
    if not isinstance(table_name, str) or not _IDENTIFIER_RE.match(table_name):
        raise ValueError(f"Unsafe table identifier: {table_name!r}")
    return table_name


def substitute_table_placeholder(sql: str, table_name: str) -> str:
    """
    Replace every placeholder token in generated SQL with the real table name.

    Args:
        sql: Generated SQL containing TABLE_PLACEHOLDER
        table_name: Identifier from the controlled naming scheme

    Returns:
        SQL with the placeholder substituted
    """
    validate_table_identifier(table_name)
    if TABLE_PLACEHOLDER not in sql:
        logger.warning("Generated SQL does not reference the table placeholder")
    return sql.replace(TABLE_PLACEHOLDER, table_name)


def generate_table_name(now_ms: Optional[int] = None) -> str:
    """Timestamp-based name for a newly uploaded table"""
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    return f"{UPLOAD_TABLE_PREFIX}{now_ms}"


def sanitize_column_name(name: str) -> str:
    """Lower-case a header and replace anything outside [a-z0-9_] with '_'"""
    sanitized = re.sub(r"[^a-z0-9_]", "_", name.lower())
    if sanitized[:1].isdigit():
        sanitized = f"_{sanitized}"
    return sanitized
