"""Final result node"""
import logging
from typing import Dict, Any

from ..state import WorkflowState

logger = logging.getLogger(__name__)


async def assemble_result(state: WorkflowState) -> Dict[str, Any]:
    """Join the chart and explanation branches into the final result"""
    query_id = state["query_id"]
    results = state.get("query_results") or []
    explanation = state.get("explanation")

    final_result = {
        "success": True,
        "queryId": query_id,
        "question": state["question"],
        "sqlQuery": state["generated_sql"],
        "results": results,
        "columns": list(results[0].keys()) if results else [],
        "chartConfig": state.get("chart_config"),
        "chartData": state.get("chart_data") or [],
        "explanations": explanation.explanations if explanation else None,
        "explanationError": state.get("explanation_error"),
    }

    logger.info(f"[{query_id}] Result assembled ({len(results)} rows)")
    return {"final_result": final_result}
