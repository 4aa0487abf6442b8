"""JSON helpers for database values and model responses"""
import json
import logging
from decimal import Decimal
from datetime import datetime, date, time
from typing import Any, Dict, List

logger = logging.getLogger(__name__)


class CustomJSONEncoder(json.JSONEncoder):
    """
    JSON encoder that handles database scalars:
    - Decimal objects (NUMERIC columns)
    - datetime/date/time objects
    """

    def default(self, obj: Any) -> Any:
        if isinstance(obj, Decimal):
            return float(obj)
        elif isinstance(obj, (datetime, date, time)):
            return obj.isoformat()
        return super().default(obj)


def json_dumps(obj: Any, **kwargs) -> str:
    """
    JSON dumps with the custom encoder for Decimal and temporal types.

    Args:
        obj: Object to serialize
        **kwargs: Additional arguments to pass to json.dumps

    Returns:
        JSON string
    """
    return json.dumps(obj, cls=CustomJSONEncoder, **kwargs)


def normalize_value(value: Any) -> Any:
    """Convert one driver scalar into a plain string/number value"""
    if isinstance(value, Decimal):
        return float(value)
    elif isinstance(value, (datetime, date, time)):
        return value.isoformat()
    elif isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value).hex()
    return value


def normalize_rows(rows: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Normalize every value of every row, keeping row and column order"""
    return [
        {key: normalize_value(value) for key, value in row.items()}
        for row in rows
    ]


def parse_json_response(response_text: str) -> Any:
    """
    Parse a JSON model response.

    Falls back to the first fenced ```json block when the model wrapped
    its answer in markdown.

    Raises:
        ValueError: If no JSON can be extracted
    """
    text = (response_text or "").strip()
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        if "```json" in text:
            fenced = text.split("```json", 1)[1].split("```", 1)[0].strip()
            logger.info("Extracted JSON from markdown block")
            return json.loads(fenced)
        raise ValueError(f"Model did not return valid JSON: {text[:200]}") from e
