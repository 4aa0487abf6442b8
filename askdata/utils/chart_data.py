"""
Chart colors and chart-type-specific data shaping.

Everything here returns new lists and dicts; the result set handed in is
never modified.
"""
import logging
import math
import re
from decimal import Decimal
from typing import Any, Dict, List, Optional, Sequence

from ..config import settings
from ..models import ChartConfig

logger = logging.getLogger(__name__)

# Palette tokens resolved by the rendering layer's theme
COLOR_PALETTE = [f"hsl(var(--chart-{index}))" for index in range(1, 9)]

CATEGORICAL_CHART_TYPES = ("bar", "pie")

# Plain ASCII decimal notation only: no digit separators, no other scripts' digits
_NUMERIC_RE = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$", re.ASCII)
_INTEGER_RE = re.compile(r"^[+-]?\d+$", re.ASCII)


def get_color_for_index(index: int) -> str:
    """
    Get color for a given index (wraps around if index > palette size).

    Args:
        index: Zero-based index

    Returns:
        Palette color token
    """
    return COLOR_PALETTE[index % len(COLOR_PALETTE)]


def assign_colors(y_keys: Sequence[str]) -> Dict[str, str]:
    """Map each y key to a palette color by its position in y_keys"""
    return {key: get_color_for_index(index) for index, key in enumerate(y_keys)}


def coerce_numeric(value: Any) -> Any:
    """
    Return value as a number when it parses as a finite one, else unchanged.

    Booleans and None are left alone. Integral strings become int,
    other numeric strings become float.
    """
    if value is None or isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, str):
        text = value.strip()
        if not _NUMERIC_RE.match(text):
            return value
        if _INTEGER_RE.match(text):
            return int(text)
        number = float(text)
        return number if math.isfinite(number) else value
    return value


def coerce_rows(rows: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Apply numeric coercion to every value of every row"""
    return [{key: coerce_numeric(value) for key, value in row.items()} for row in rows]


def limit_rows(rows: List[Dict[str, Any]], chart_type: str, limit: Optional[int] = None) -> List[Dict[str, Any]]:
    """
    Keep categorical charts legible by truncating to the first rows.

    Only bar and pie charts are truncated; row order is preserved.
    """
    if chart_type not in CATEGORICAL_CHART_TYPES:
        return list(rows)
    limit = limit if limit is not None else settings.CHART_MAX_CATEGORICAL_ROWS
    if len(rows) > limit:
        logger.info(f"Truncating {chart_type} chart data from {len(rows)} to {limit} rows")
    return list(rows[:limit])


def should_pivot(config: ChartConfig) -> bool:
    """Multi-line charts with a measurement column among the y keys are pivoted"""
    return bool(
        config.type == "line"
        and config.multipleLines
        and config.measurementColumn
        and config.measurementColumn in config.yKeys
        and config.lineCategories
    )


def _find_category_column(
    rows: List[Dict[str, Any]],
    x_key: str,
    measurement: str,
    categories: Sequence[str]
) -> Optional[str]:
    candidates = [key for key in rows[0].keys() if key not in (x_key, measurement)]
    wanted = {str(category) for category in categories}
    for key in candidates:
        if any(str(row.get(key)) in wanted for row in rows):
            return key
    return candidates[0] if candidates else None


def pivot_multi_line(
    rows: List[Dict[str, Any]],
    x_key: str,
    measurement: str,
    categories: Sequence[str]
) -> List[Dict[str, Any]]:
    """
    Pivot long-format rows into one row per x value with a key per category.

    The grouping column is the first column (other than x and measurement)
    whose values name one of the categories. Rows sharing an x value are
    merged; a missing (x, category) pair leaves the key absent.

    Example:
        [{x: A, cat: p, v: 1}, {x: A, cat: q, v: 2}, {x: B, cat: p, v: 3}]
        -> [{x: A, p: 1, q: 2}, {x: B, p: 3}]
    """
    if not rows:
        return []

    category_column = _find_category_column(rows, x_key, measurement, categories)
    if category_column is None:
        logger.warning("No grouping column found for multi-line pivot; leaving rows as-is")
        return [dict(row) for row in rows]

    by_label = {str(category): category for category in categories}
    pivoted: Dict[Any, Dict[str, Any]] = {}

    for row in rows:
        label = str(row.get(category_column))
        if label not in by_label:
            continue
        x_value = row.get(x_key)
        point = pivoted.setdefault(x_value, {x_key: x_value})
        point[by_label[label]] = row.get(measurement)

    logger.info(f"Pivoted {len(rows)} rows on '{category_column}' into {len(pivoted)} points")
    return list(pivoted.values())


def prepare_chart_data(rows: List[Dict[str, Any]], config: ChartConfig) -> List[Dict[str, Any]]:
    """
    Shape result rows for rendering under a finalized chart configuration.

    Args:
        rows: Result set rows
        config: Finalized chart configuration

    Returns:
        New list of rows: numerically coerced, truncated for bar/pie,
        pivoted for multi-line charts
    """
    data = coerce_rows(rows)
    data = limit_rows(data, config.type)
    if should_pivot(config):
        data = pivot_multi_line(data, config.xKey, config.measurementColumn, config.lineCategories)
    return data
