"""Chart configuration node"""
import logging
from typing import Dict, Any

from ...core_api.chart_synthesizer import synthesize_chart_config
from ...utils.chart_data import prepare_chart_data
from ..state import WorkflowState

logger = logging.getLogger(__name__)


async def synthesize_chart(state: WorkflowState) -> Dict[str, Any]:
    """
    Suggest a chart configuration and shape the rows for rendering.

    Never sets an error: synthesis falls back to a heuristic chart.

    Args:
        state: Current workflow state

    Returns:
        Updated state with chart_config and chart_data
    """
    query_id = state["query_id"]
    results = state.get("query_results") or []

    logger.info(f"[{query_id}] Synthesizing chart configuration for {len(results)} rows")

    config = await synthesize_chart_config(results, state["question"])
    chart_data = prepare_chart_data(results, config)

    logger.info(f"[{query_id}] Chart: type={config.type}, xKey={config.xKey}, yKeys={config.yKeys}, points={len(chart_data)}")

    return {
        "chart_config": config,
        "chart_data": chart_data
    }
