"""Shared fixtures: stand-ins for the language model and the datastore"""
import json
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest


@pytest.fixture
def make_llm():
    """Factory for a fake chat model whose ainvoke returns fixed content or raises"""

    def _make(content=None, error=None):
        llm = MagicMock()
        if error is not None:
            llm.ainvoke = AsyncMock(side_effect=error)
        else:
            if not isinstance(content, str):
                content = json.dumps(content)
            llm.ainvoke = AsyncMock(return_value=SimpleNamespace(content=content))
        return llm

    return _make


@pytest.fixture
def department_rows():
    """Rows for 'average package by department'"""
    return [
        {"department": "CSE", "avg_package": 8.5},
        {"department": "ECE", "avg_package": 6.25},
        {"department": "ME", "avg_package": 4.75},
    ]
