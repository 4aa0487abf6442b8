"""LangGraph workflow chaining the query pipeline stages"""
from .query_workflow import create_query_workflow, get_workflow, run_query_pipeline

__all__ = ["create_query_workflow", "get_workflow", "run_query_pipeline"]
