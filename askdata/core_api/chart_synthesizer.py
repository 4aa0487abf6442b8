"""Chart configuration synthesis with validation, repair and heuristic fallback"""
import logging
from typing import List, Dict, Any

from pydantic import ValidationError

from ..config import settings
from ..models import ChartConfig, ChartConfiguration
from ..prompts.chart_config import CHART_CONFIG_SYSTEM_PROMPT, create_chart_config_prompt
from ..services.ollama_client import get_llm
from ..utils.chart_data import assign_colors
from ..utils.json_encoder import parse_json_response

logger = logging.getLogger(__name__)

NO_DATA_X_KEY = "category"
NO_DATA_Y_KEY = "value"


def no_data_chart_config() -> ChartConfig:
    """Sentinel configuration for an empty result set"""
    return ChartConfig(
        type="bar",
        title="No data",
        description="The query returned no rows, so there is nothing to plot.",
        takeaway="No matching records were found. Try broadening the question.",
        xKey=NO_DATA_X_KEY,
        yKeys=[NO_DATA_Y_KEY],
        legend=False
    )


def heuristic_chart_config(results: List[Dict[str, Any]]) -> ChartConfig:
    """
    Minimal bar chart derived from the first row's columns.

    The first column is the x-axis and the second column the single y key;
    a single-column result uses that column for both.
    """
    columns = list(results[0].keys())
    x_key = columns[0]
    y_key = columns[1] if len(columns) > 1 else columns[0]
    return ChartConfig(
        type="bar",
        title="Query Results",
        description=f"{y_key} for each {x_key}.",
        takeaway="A suggested chart could not be generated; showing a basic bar chart.",
        xKey=x_key,
        yKeys=[y_key],
        legend=False
    )


async def _request_chart_config(results: List[Dict[str, Any]], question: str) -> ChartConfig:
    llm = get_llm(model=settings.OLLAMA_CHART_MODEL, temperature=0.2, json_mode=True)

    messages = [
        {"role": "system", "content": CHART_CONFIG_SYSTEM_PROMPT},
        {"role": "user", "content": create_chart_config_prompt(results, question, settings.CHART_PROMPT_MAX_ROWS)}
    ]

    response = await llm.ainvoke(messages)
    response_text = response.content if hasattr(response, "content") else str(response)
    return ChartConfig.model_validate(parse_json_response(response_text))


async def synthesize_chart_config(results: List[Dict[str, Any]], question: str) -> ChartConfiguration:
    """
    Produce a validated, colorized chart configuration. Never raises.

    Args:
        results: Query result rows
        question: Original natural language question

    Returns:
        Model-produced configuration when it validates, otherwise the
        heuristic (or no-data) configuration; colors always assigned from
        the palette in yKeys order
    """
    if not results or not results[0]:
        logger.info("Empty result set, using no-data chart configuration")
        config = no_data_chart_config()
    else:
        try:
            config = await _request_chart_config(results, question)
            logger.info(f"Model chart configuration: type={config.type}, xKey={config.xKey}, yKeys={config.yKeys}")
        except (ValidationError, ValueError) as e:
            logger.warning(f"Chart configuration did not validate, using heuristic fallback: {e}")
            config = heuristic_chart_config(results)
        except Exception as e:
            logger.warning(f"Chart configuration request failed, using heuristic fallback: {e}")
            config = heuristic_chart_config(results)

    return ChartConfiguration(
        **config.model_dump(exclude_none=True),
        colors=assign_colors(config.yKeys)
    )
