"""Workflow state definition for LangGraph"""
from typing import TypedDict, Optional, List, Dict, Any
from ..models import (
    SchemaDescriptor,
    GuardDecision,
    ChartConfiguration,
    QueryExplanation
)


class WorkflowState(TypedDict, total=False):
    """
    State definition for LangGraph workflow.

    Each node receives the current state and returns only the keys it
    updates. The chart and explanation nodes run in the same step, so they
    never write the same key.
    """

    # ========================================================================
    # Input (Set at workflow start)
    # ========================================================================
    query_id: str
    question: str
    table_name: Optional[str]

    # ========================================================================
    # Intermediate Results (Updated by nodes)
    # ========================================================================
    schema: Optional[SchemaDescriptor]
    generated_sql: Optional[str]
    guard_decision: Optional[GuardDecision]
    query_results: Optional[List[Dict[str, Any]]]
    chart_config: Optional[ChartConfiguration]
    chart_data: Optional[List[Dict[str, Any]]]
    explanation: Optional[QueryExplanation]
    explanation_error: Optional[str]

    # ========================================================================
    # Control Flow
    # ========================================================================
    error: Optional[str]
    error_code: Optional[str]

    # ========================================================================
    # Output (Final result)
    # ========================================================================
    final_result: Optional[Dict[str, Any]]


def create_initial_state(
    query_id: str,
    question: str,
    table_name: Optional[str] = None
) -> WorkflowState:
    """
    Create initial workflow state.

    Args:
        query_id: Unique identifier for this request
        question: User's natural language question
        table_name: Uploaded table to query (None for the default table)

    Returns:
        Initial workflow state
    """
    return WorkflowState(
        # Input
        query_id=query_id,
        question=question,
        table_name=table_name,

        # Intermediate (initialized to None)
        schema=None,
        generated_sql=None,
        guard_decision=None,
        query_results=None,
        chart_config=None,
        chart_data=None,
        explanation=None,
        explanation_error=None,

        # Control flow
        error=None,
        error_code=None,

        # Output
        final_result=None
    )
