"""Schema lookup node"""
import asyncio
import logging
from typing import Dict, Any

from ...exceptions import QueryServiceError
from ...utils.schema import describe_table
from ..state import WorkflowState

logger = logging.getLogger(__name__)


async def fetch_schema(state: WorkflowState) -> Dict[str, Any]:
    """
    Describe the uploaded table the question targets.

    The default placements table has a fixed descriptor, so no lookup is
    made when no table name is given.

    Args:
        state: Current workflow state

    Returns:
        Updated state with schema
    """
    query_id = state["query_id"]
    table_name = state.get("table_name")

    if not table_name:
        logger.info(f"[{query_id}] Using the fixed placements schema")
        return {"schema": None}

    logger.info(f"[{query_id}] Describing table {table_name}")

    try:
        schema = await asyncio.to_thread(describe_table, table_name)
        logger.info(f"[{query_id}] Schema has {len(schema.columns)} columns: {schema.column_names}")
        return {"schema": schema}

    except ValueError as e:
        logger.warning(f"[{query_id}] Invalid table name: {e}")
        return {
            "error": str(e),
            "error_code": "INVALID_TABLE_NAME"
        }
    except QueryServiceError as e:
        logger.warning(f"[{query_id}] Schema lookup failed: {e.message}")
        return {
            "error": e.message,
            "error_code": e.error_code
        }
