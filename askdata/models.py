"""Pydantic models for the query pipeline and its API"""
from typing import Optional, Dict, Any, List, Literal, Tuple
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


ColumnType = Literal["integer", "decimal", "boolean", "date", "text"]
ChartType = Literal["bar", "line", "area", "pie", "scatter"]


# ============================================================================
# Schema Models
# ============================================================================

class SchemaColumn(BaseModel):
    """A single column of a schema descriptor"""
    model_config = ConfigDict(frozen=True)

    name: str
    type: ColumnType
    nullable: bool = True


class SchemaDescriptor(BaseModel):
    """Ordered column list of one table, used to ground prompts"""
    model_config = ConfigDict(frozen=True)

    table_name: str
    columns: Tuple[SchemaColumn, ...]

    @property
    def column_names(self) -> List[str]:
        return [column.name for column in self.columns]

    def describe(self, table_label: Optional[str] = None) -> str:
        """
        Render the descriptor as a compact DDL-like block for prompts.

        Args:
            table_label: Name to print instead of the real table name
                (used when the model must write a placeholder token)

        Returns:
            Multi-line schema text
        """
        lines = []
        for column in self.columns:
            suffix = "" if column.nullable else " NOT NULL"
            lines.append(f"  {column.name} {column.type.upper()}{suffix}")
        body = ",\n".join(lines)
        return f"{table_label or self.table_name} (\n{body}\n);"


# ============================================================================
# Guard Models
# ============================================================================

class GuardDecision(BaseModel):
    """Outcome of the static SQL safety gate"""
    accepted: bool
    reason: Optional[str] = None


# ============================================================================
# Chart Models
# ============================================================================

def _as_label_list(value: Any) -> Any:
    """Bare string -> one-item list; numeric entries -> str. Anything else is left for validation."""
    if isinstance(value, str):
        return [value]
    if isinstance(value, (list, tuple)):
        return [
            str(item) if isinstance(item, (int, float)) and not isinstance(item, bool) else item
            for item in value
        ]
    return value


class ChartConfig(BaseModel):
    """Chart configuration as requested from the language model (no colors)"""
    model_config = ConfigDict(extra="ignore")

    type: ChartType = Field(..., description="Type of chart")
    title: str
    description: str = Field(
        ...,
        description="What the chart shows and what is interesting about the way the data is displayed"
    )
    takeaway: str = Field(..., description="Main takeaway from the chart")
    xKey: str = Field(..., min_length=1, description="Key for x-axis or category")
    yKeys: List[str] = Field(
        ...,
        min_length=1,
        description="Key(s) for y-axis values; the quantitative column(s)"
    )
    legend: bool = Field(..., description="Whether to show legend")
    multipleLines: Optional[bool] = Field(
        None,
        description="For line charts only: whether the chart is comparing groups of data"
    )
    measurementColumn: Optional[str] = Field(
        None,
        description="For line charts only: key for the quantitative y-axis column to measure against"
    )
    lineCategories: Optional[List[str]] = Field(
        None,
        description="For line charts only: categories used to split the data into separate lines"
    )

    @field_validator("type", mode="before")
    @classmethod
    def _normalize_type(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @field_validator("yKeys")
    @classmethod
    def _dedupe_y_keys(cls, value: List[str]) -> List[str]:
        return list(dict.fromkeys(value))

    @model_validator(mode="before")
    @classmethod
    def _repair_model_output(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        # Models answer year series with numbers and single keys as bare strings
        for key in ("yKeys", "lineCategories"):
            if key in data:
                data[key] = _as_label_list(data[key])
        # measurementColumn is only meaningful when it names one of the y keys
        measurement = data.get("measurementColumn")
        y_keys = data.get("yKeys")
        if measurement is not None and isinstance(y_keys, list) and measurement not in y_keys:
            data["measurementColumn"] = None
        return data


class ChartConfiguration(ChartConfig):
    """Validated chart configuration with deterministic colors"""
    model_config = ConfigDict(extra="ignore", frozen=True)

    colors: Dict[str, str]


# ============================================================================
# Explanation Models
# ============================================================================

class ExplanationSection(BaseModel):
    """One labeled clause of a SQL query with its plain-language explanation"""
    section: str
    explanation: str = ""

    @field_validator("explanation", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value


class QueryExplanation(BaseModel):
    """Clause-by-clause explanation of a generated query"""
    explanations: List[ExplanationSection] = Field(default_factory=list)


# ============================================================================
# Request / Response Models
# ============================================================================

class AskRequest(BaseModel):
    """Run the whole pipeline for one question"""
    question: str = Field(..., min_length=1, description="User's natural language question")
    tableName: Optional[str] = Field(
        None,
        description="Uploaded table to query instead of the default placements table"
    )


class AskResponse(BaseModel):
    """Pipeline outcome; error fields are set when the pipeline aborted"""
    success: bool
    queryId: str
    question: str
    sqlQuery: Optional[str] = None
    results: List[Dict[str, Any]] = Field(default_factory=list)
    columns: List[str] = Field(default_factory=list)
    chartConfig: Optional[ChartConfiguration] = None
    chartData: List[Dict[str, Any]] = Field(default_factory=list)
    explanations: Optional[List[ExplanationSection]] = None
    explanationError: Optional[str] = None
    error: Optional[str] = None
    errorCode: Optional[str] = None


class HealthCheckResponse(BaseModel):
    """Health check response"""
    status: str
    service: str
    version: str
    timestamp: str
    dependencies: Dict[str, str] = Field(
        default_factory=dict,
        description="Status of dependencies (postgres, ollama)"
    )
