"""Core API routes - one endpoint per pipeline stage"""
import asyncio
import logging
from fastapi import APIRouter, HTTPException

from ..exceptions import (
    QueryServiceError,
    GenerationFailure,
    QueryRejected,
    TargetMissing,
    ExplanationFailure
)
from ..utils.chart_data import prepare_chart_data
from ..utils.schema import describe_table
from ..utils.sql_guard import authorize
from .chart_synthesizer import synthesize_chart_config
from .explainer import explain_query
from .models import (
    GenerateSQLRequest, GenerateSQLResponse,
    AuthorizeSQLRequest, AuthorizeSQLResponse,
    ExecuteSQLRequest, ExecuteSQLResponse,
    ChartConfigRequest, ChartConfigResponse,
    ExplainSQLRequest, ExplainSQLResponse,
    SuggestionsResponse
)
from .service import generate_query, execute_query

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/core/v1", tags=["Core API"])

SUGGESTED_QUESTIONS = [
    "Show me the average package by department",
    "What is the distribution of CPI scores?",
    "Compare internship completion rates across departments",
    "Show placement rates by company",
    "Analyze the correlation between CPI and package",
    "What are the top 5 companies by placement count?"
]

_STATUS_BY_ERROR = {
    GenerationFailure: 502,
    QueryRejected: 400,
    TargetMissing: 404,
    ExplanationFailure: 502,
}


def to_http_exception(error: QueryServiceError) -> HTTPException:
    """Map a pipeline error to an HTTP error with its error code"""
    status_code = _STATUS_BY_ERROR.get(type(error), 500)
    return HTTPException(
        status_code=status_code,
        detail={"error": error.message, "errorCode": error.error_code}
    )


@router.post("/generate-sql", response_model=GenerateSQLResponse)
async def generate_sql_endpoint(request: GenerateSQLRequest):
    """
    Generate a candidate SELECT for a question.

    When tableName is given the uploaded table's schema is looked up first.
    """
    try:
        schema = await asyncio.to_thread(describe_table, request.tableName) if request.tableName else None
        sql = await generate_query(request.question, schema)
        return GenerateSQLResponse(sql=sql)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except QueryServiceError as e:
        logger.warning(f"SQL generation failed: {e.message}")
        raise to_http_exception(e)


@router.post("/authorize-sql", response_model=AuthorizeSQLResponse)
async def authorize_sql_endpoint(request: AuthorizeSQLRequest):
    """Run the static SQL guard without executing anything"""
    decision = authorize(request.sql)
    return AuthorizeSQLResponse(accepted=decision.accepted, reason=decision.reason)


@router.post("/execute-sql", response_model=ExecuteSQLResponse)
def execute_sql_endpoint(request: ExecuteSQLRequest):
    """
    Execute an authorized SQL query and return results.

    Args:
        request: SQL execution request

    Returns:
        Query results with columns and rows
    """
    try:
        rows = execute_query(request.sql)
    except QueryServiceError as e:
        logger.warning(f"SQL execution failed: {e.message}")
        raise to_http_exception(e)

    return ExecuteSQLResponse(
        columns=list(rows[0].keys()) if rows else [],
        rows=rows,
        row_count=len(rows)
    )


@router.post("/chart-config", response_model=ChartConfigResponse)
async def chart_config_endpoint(request: ChartConfigRequest):
    """Suggest a chart configuration and shape the rows for it"""
    config = await synthesize_chart_config(request.results, request.question)
    return ChartConfigResponse(
        chartConfig=config,
        chartData=prepare_chart_data(request.results, config)
    )


@router.post("/explain-sql", response_model=ExplainSQLResponse)
async def explain_sql_endpoint(request: ExplainSQLRequest):
    """Explain a query clause by clause"""
    try:
        explanation = await explain_query(request.question, request.sql)
    except ExplanationFailure as e:
        raise to_http_exception(e)
    return ExplainSQLResponse(explanations=explanation.explanations)


@router.get("/suggestions", response_model=SuggestionsResponse)
async def suggestions_endpoint():
    """Starter questions for the placements dataset"""
    return SuggestionsResponse(suggestions=SUGGESTED_QUESTIONS)
