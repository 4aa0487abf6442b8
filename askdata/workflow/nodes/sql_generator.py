"""SQL generation node"""
import logging
from typing import Dict, Any

from ...core_api.service import generate_query
from ...exceptions import GenerationFailure
from ..state import WorkflowState

logger = logging.getLogger(__name__)


async def generate_sql(state: WorkflowState) -> Dict[str, Any]:
    """
    Generate SQL from the question and optional schema.

    Args:
        state: Current workflow state

    Returns:
        Updated state with generated_sql
    """
    query_id = state["query_id"]

    logger.info(f"[{query_id}] ===== SQL GENERATOR START =====")
    logger.info(f"[{query_id}] Question: {state['question']}")

    try:
        sql = await generate_query(state["question"], state.get("schema"))
        logger.info(f"[{query_id}] ===== SQL GENERATOR END (SUCCESS) =====")
        return {"generated_sql": sql}

    except GenerationFailure as e:
        logger.error(f"[{query_id}] ===== SQL GENERATOR END (ERROR) =====")
        logger.error(f"[{query_id}] {e.message}")
        return {
            "error": e.message,
            "error_code": e.error_code
        }
