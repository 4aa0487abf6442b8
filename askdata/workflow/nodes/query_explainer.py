"""SQL explanation node"""
import logging
from typing import Dict, Any

from ...core_api.explainer import explain_query
from ...exceptions import ExplanationFailure
from ..state import WorkflowState

logger = logging.getLogger(__name__)


async def explain_sql(state: WorkflowState) -> Dict[str, Any]:
    """
    Explain the generated SQL. Failure is recorded but does not end the workflow.

    Args:
        state: Current workflow state

    Returns:
        Updated state with explanation or explanation_error
    """
    query_id = state["query_id"]

    try:
        explanation = await explain_query(state["question"], state["generated_sql"])
        logger.info(f"[{query_id}] Explanation has {len(explanation.explanations)} sections")
        return {"explanation": explanation}

    except ExplanationFailure as e:
        logger.warning(f"[{query_id}] Explanation unavailable: {e.message}")
        return {"explanation_error": e.message}
