"""Prompts for chart configuration synthesis"""
from typing import Any, Dict, List

from ..utils.json_encoder import json_dumps

CHART_CONFIG_SYSTEM_PROMPT = """You are a data visualization expert.

Given rows returned by a SQL query and the user's question, produce the chart
configuration that best visualises the data and answers the question.

**Chart Types:**
- **bar**: Categorical comparison (e.g., average package by department)
- **line**: Trends over an ordered axis such as years
- **area**: Cumulative trends over an ordered axis
- **pie**: Parts of a whole with few categories
- **scatter**: Correlation between two numeric columns

**Rules:**
1. xKey and every entry of yKeys must be column names that appear in the data.
2. yKeys are the quantitative column(s).
3. For multiple groups, use multi-lines if appropriate: set type "line",
   multipleLines true, measurementColumn to the quantitative column (also listed in yKeys),
   and lineCategories to the distinct values of the grouping column.
4. Do not choose colors.

**Output Format:**
Return ONLY valid JSON:
{
  "type": "bar|line|area|pie|scatter",
  "title": "short chart title",
  "description": "what the chart shows and what is interesting about the way the data is displayed",
  "takeaway": "main takeaway from the chart",
  "xKey": "column for the x-axis or category",
  "yKeys": ["quantitative column", "..."],
  "legend": true,
  "multipleLines": false,
  "measurementColumn": null,
  "lineCategories": null
}"""

CHART_CONFIG_USER_PROMPT = """User Query:
{question}

Data ({shown} of {total} rows):
{data}"""


def create_chart_config_prompt(results: List[Dict[str, Any]], question: str, max_rows: int) -> str:
    """
    Create prompt for chart configuration.

    Args:
        results: Query result rows
        question: Original natural language question
        max_rows: Number of leading rows to include

    Returns:
        User prompt string
    """
    sample = results[:max_rows]
    return CHART_CONFIG_USER_PROMPT.format(
        question=question.strip(),
        shown=len(sample),
        total=len(results),
        data=json_dumps(sample, indent=2)
    )
