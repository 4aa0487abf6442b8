"""SQL guard node"""
import logging
from typing import Dict, Any

from ...exceptions import QueryRejected
from ...utils.sql_guard import authorize
from ..state import WorkflowState

logger = logging.getLogger(__name__)


async def authorize_sql(state: WorkflowState) -> Dict[str, Any]:
    """
    Run the static safety gate on the generated SQL.

    Args:
        state: Current workflow state

    Returns:
        Updated state with guard_decision, plus an error when rejected
    """
    query_id = state["query_id"]
    decision = authorize(state["generated_sql"])

    if decision.accepted:
        logger.info(f"[{query_id}] SQL accepted by guard")
        return {"guard_decision": decision}

    logger.warning(f"[{query_id}] SQL rejected by guard: {decision.reason}")
    rejection = QueryRejected(decision.reason)
    return {
        "guard_decision": decision,
        "error": rejection.message,
        "error_code": rejection.error_code
    }
