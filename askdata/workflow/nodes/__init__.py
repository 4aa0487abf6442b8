"""Workflow nodes for LangGraph"""
from . import (
    schema_fetcher,
    sql_generator,
    sql_guard,
    sql_executor,
    chart_synthesizer,
    query_explainer,
    result_assembler
)

__all__ = [
    "schema_fetcher",
    "sql_generator",
    "sql_guard",
    "sql_executor",
    "chart_synthesizer",
    "query_explainer",
    "result_assembler"
]
