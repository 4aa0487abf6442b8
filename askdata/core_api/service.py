"""Core query operations - reusable by both the LangGraph workflow and the REST API"""
import logging
import re
from typing import List, Dict, Any, Optional

from sqlalchemy.exc import SQLAlchemyError

from ..config import settings
from ..exceptions import GenerationFailure, QueryRejected, TargetMissing, ExecutionError
from ..models import SchemaDescriptor
from ..prompts.sql_generator import create_sql_system_prompt, create_sql_generation_prompt
from ..services.ollama_client import get_llm
from ..services.postgres_client import PostgresClient, get_postgres_client
from ..utils.json_encoder import normalize_rows, parse_json_response
from ..utils.schema import substitute_table_placeholder
from ..utils.sql_guard import authorize

logger = logging.getLogger(__name__)

_RELATION_MISSING_RE = re.compile(r'relation "([^"]+)" does not exist')


async def generate_query(question: str, schema: Optional[SchemaDescriptor] = None) -> str:
    """
    Turn a natural language question into a candidate SELECT statement.

    Args:
        question: User's natural language question
        schema: Descriptor of an uploaded table; None targets the placements table

    Returns:
        Candidate SQL text (not yet authorized)

    Raises:
        GenerationFailure: If the model errors or returns no usable query
    """
    messages = [
        {"role": "system", "content": create_sql_system_prompt(schema)},
        {"role": "user", "content": create_sql_generation_prompt(question)}
    ]

    try:
        llm = get_llm(model=settings.OLLAMA_SQL_MODEL, temperature=0.0, json_mode=True)
        response = await llm.ainvoke(messages)
    except Exception as e:
        logger.exception("SQL generation call failed")
        raise GenerationFailure(f"Failed to generate query: {e}") from e

    response_text = response.content if hasattr(response, "content") else str(response)
    logger.info(f"LLM returned {len(response_text)} chars")

    try:
        payload = parse_json_response(response_text)
    except ValueError as e:
        raise GenerationFailure(f"Failed to generate query: {e}") from e

    sql_query = payload.get("query") if isinstance(payload, dict) else None
    if not isinstance(sql_query, str) or not sql_query.strip():
        raise GenerationFailure("Failed to generate query: model returned no query")

    sql_query = sql_query.strip()
    # Remove trailing semicolon if present
    if sql_query.endswith(";"):
        sql_query = sql_query[:-1].strip()

    if schema is not None:
        sql_query = substitute_table_placeholder(sql_query, schema.table_name)

    logger.info(f"Generated SQL: {sql_query}")
    return sql_query


def execute_query(sql: str, client: Optional[PostgresClient] = None) -> List[Dict[str, Any]]:
    """
    Execute a guard-accepted SELECT exactly once.

    Args:
        sql: SQL text that passes the guard
        client: Datastore client (defaults to the global client)

    Returns:
        Normalized result rows

    Raises:
        QueryRejected: If the text does not pass the guard (nothing is executed)
        TargetMissing: If the queried table does not exist
        ExecutionError: For any other datastore failure
    """
    decision = authorize(sql)
    if not decision.accepted:
        raise QueryRejected(decision.reason)

    client = client or get_postgres_client()

    try:
        rows = client.execute_query(sql)
    except SQLAlchemyError as e:
        # DBAPI errors carry the driver message without the SQL echo
        error_msg = str(getattr(e, "orig", None) or e).strip()
        missing = _RELATION_MISSING_RE.search(error_msg)
        if missing:
            logger.warning(f"Table not found: {missing.group(1)}")
            raise TargetMissing(
                f"Table does not exist: {missing.group(1)}",
                relation=missing.group(1)
            ) from e
        logger.error(f"SQL execution failed: {error_msg}")
        raise ExecutionError(f"Query execution failed: {error_msg}") from e

    return normalize_rows(rows)
