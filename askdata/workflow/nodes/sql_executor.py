"""SQL execution node"""
import asyncio
import logging
from typing import Dict, Any

from ...core_api.service import execute_query
from ...exceptions import QueryServiceError, TargetMissing
from ..state import WorkflowState

logger = logging.getLogger(__name__)


async def execute_sql(state: WorkflowState) -> Dict[str, Any]:
    """
    Execute the authorized SQL against PostgreSQL.

    Args:
        state: Current workflow state

    Returns:
        Updated state with query_results
    """
    query_id = state["query_id"]
    sql = state["generated_sql"]

    logger.info(f"[{query_id}] ===== SQL EXECUTOR START =====")
    logger.info(f"[{query_id}] SQL to execute ({len(sql)} chars): {sql[:500]}")

    try:
        results = await asyncio.to_thread(execute_query, sql)

    except TargetMissing as e:
        logger.error(f"[{query_id}] ===== SQL EXECUTOR END (TABLE MISSING) =====")
        return {
            "error": f"{e.message}. Upload or seed the data first.",
            "error_code": e.error_code
        }
    except QueryServiceError as e:
        logger.error(f"[{query_id}] ===== SQL EXECUTOR END (ERROR) =====")
        logger.error(f"[{query_id}] {e.message}")
        return {
            "error": f"{e.message}. Try rephrasing the question.",
            "error_code": e.error_code
        }

    logger.info(f"[{query_id}] Query returned {len(results)} rows")
    if results:
        logger.info(f"[{query_id}] Result columns: {list(results[0].keys())}")
    else:
        logger.warning(f"[{query_id}] Query returned no results")

    logger.info(f"[{query_id}] ===== SQL EXECUTOR END (SUCCESS) =====")
    return {"query_results": results}
