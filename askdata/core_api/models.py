"""Core API request/response models"""
from typing import List, Dict, Any, Optional
from pydantic import BaseModel, Field

from ..models import ChartConfiguration, ExplanationSection


class GenerateSQLRequest(BaseModel):
    """Request to generate SQL for a question"""
    question: str = Field(..., min_length=1, description="Natural language question")
    tableName: Optional[str] = Field(None, description="Uploaded table to target")


class GenerateSQLResponse(BaseModel):
    """Generated (not yet authorized) SQL"""
    sql: str


class AuthorizeSQLRequest(BaseModel):
    """Request to run the SQL guard"""
    sql: str = Field(..., description="Candidate SQL")


class AuthorizeSQLResponse(BaseModel):
    """Guard decision"""
    accepted: bool
    reason: Optional[str] = None


class ExecuteSQLRequest(BaseModel):
    """Request to execute SQL query"""
    sql: str = Field(..., description="SQL query to execute")


class ExecuteSQLResponse(BaseModel):
    """Response from SQL execution"""
    columns: List[str]
    rows: List[Dict[str, Any]]
    row_count: int


class ChartConfigRequest(BaseModel):
    """Request to synthesize a chart configuration for query results"""
    question: str
    results: List[Dict[str, Any]]


class ChartConfigResponse(BaseModel):
    """Chart configuration plus render-ready data"""
    chartConfig: ChartConfiguration
    chartData: List[Dict[str, Any]]


class ExplainSQLRequest(BaseModel):
    """Request to explain a query"""
    question: str
    sql: str


class ExplainSQLResponse(BaseModel):
    """Clause-by-clause explanation"""
    explanations: List[ExplanationSection]


class SuggestionsResponse(BaseModel):
    """Starter questions for the default dataset"""
    suggestions: List[str]
