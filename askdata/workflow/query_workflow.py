"""LangGraph workflow for question answering"""
import logging
from typing import List, Literal, Optional
from uuid import uuid4

from langgraph.graph import StateGraph, END

from ..models import AskResponse
from .state import WorkflowState, create_initial_state
from .nodes import (
    schema_fetcher,
    sql_generator,
    sql_guard,
    sql_executor,
    chart_synthesizer,
    query_explainer,
    result_assembler
)

logger = logging.getLogger(__name__)


def check_for_errors(state: WorkflowState) -> Literal["continue", "error"]:
    """
    Check if any node has set an error in state.

    Args:
        state: Current workflow state

    Returns:
        "error" if error exists, "continue" otherwise
    """
    if state.get("error"):
        return "error"
    return "continue"


def route_after_execution(state: WorkflowState) -> List[str]:
    """
    Fan out to the chart and explanation branches once rows exist.

    Args:
        state: Current workflow state

    Returns:
        ["error"] on failure, otherwise both branch keys
    """
    if state.get("error"):
        return ["error"]
    return ["chart", "explain"]


def create_query_workflow() -> StateGraph:
    """
    Create and compile the LangGraph workflow.

    The workflow:
    1. Fetch schema -> describe an uploaded table (skipped for placements)
    2. Generate SQL -> one completion under the SELECT-only contract
    3. Authorize SQL -> static denylist gate
    4. Execute SQL -> run once against PostgreSQL
    5. Synthesize chart and explain SQL -> in parallel
    6. Assemble result

    Returns:
        Compiled workflow graph
    """
    workflow = StateGraph(WorkflowState)

    # Add nodes
    workflow.add_node("fetch_schema", schema_fetcher.fetch_schema)
    workflow.add_node("generate_sql", sql_generator.generate_sql)
    workflow.add_node("authorize_sql", sql_guard.authorize_sql)
    workflow.add_node("execute_sql", sql_executor.execute_sql)
    workflow.add_node("synthesize_chart", chart_synthesizer.synthesize_chart)
    workflow.add_node("explain_sql", query_explainer.explain_sql)
    workflow.add_node("assemble_result", result_assembler.assemble_result)

    # Set entry point
    workflow.set_entry_point("fetch_schema")

    # Linear flow with error checks
    workflow.add_conditional_edges(
        "fetch_schema",
        check_for_errors,
        {
            "continue": "generate_sql",
            "error": END
        }
    )

    workflow.add_conditional_edges(
        "generate_sql",
        check_for_errors,
        {
            "continue": "authorize_sql",
            "error": END
        }
    )

    # Rejected SQL never reaches the executor
    workflow.add_conditional_edges(
        "authorize_sql",
        check_for_errors,
        {
            "continue": "execute_sql",
            "error": END
        }
    )

    workflow.add_conditional_edges(
        "execute_sql",
        route_after_execution,
        {
            "chart": "synthesize_chart",
            "explain": "explain_sql",
            "error": END
        }
    )

    # Wait for both branches
    workflow.add_edge(["synthesize_chart", "explain_sql"], "assemble_result")
    workflow.add_edge("assemble_result", END)

    compiled = workflow.compile()

    logger.info("Query workflow compiled successfully")

    return compiled


# Global workflow instance (created once)
_workflow = None


def get_workflow():
    """Get global workflow instance"""
    global _workflow
    if _workflow is None:
        _workflow = create_query_workflow()
    return _workflow


async def run_query_pipeline(
    question: str,
    table_name: Optional[str] = None,
    query_id: Optional[str] = None
) -> AskResponse:
    """
    Run the whole pipeline for one question.

    Args:
        question: User's natural language question
        table_name: Uploaded table to query (None for placements)
        query_id: Identifier for log correlation (generated if omitted)

    Returns:
        Pipeline outcome; error and errorCode are set when it aborted
    """
    query_id = query_id or str(uuid4())
    logger.info(f"[{query_id}] Running query workflow")

    initial_state = create_initial_state(
        query_id=query_id,
        question=question,
        table_name=table_name
    )
    final_state = await get_workflow().ainvoke(initial_state)

    if final_state.get("error"):
        logger.error(f"[{query_id}] Workflow failed: {final_state['error']}")
        return AskResponse(
            success=False,
            queryId=query_id,
            question=question,
            sqlQuery=final_state.get("generated_sql"),
            error=final_state["error"],
            errorCode=final_state.get("error_code") or "WORKFLOW_ERROR"
        )

    final_result = final_state.get("final_result")
    if not final_result:
        return AskResponse(
            success=False,
            queryId=query_id,
            question=question,
            error="Workflow completed but no result generated",
            errorCode="NO_RESULT"
        )

    logger.info(f"[{query_id}] Query processing successful")
    return AskResponse(**final_result)
