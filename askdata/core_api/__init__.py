"""
Core API Module for the askdata query service

Stable, versioned REST endpoints for each pipeline stage, independent of the
LangGraph workflow that chains them.

Endpoints:
- /core/v1/generate-sql: Generate a candidate SELECT for a question
- /core/v1/authorize-sql: Run the static SQL guard
- /core/v1/execute-sql: Execute an authorized query
- /core/v1/chart-config: Suggest a chart configuration for results
- /core/v1/explain-sql: Explain a query clause by clause
- /core/v1/suggestions: Starter questions
"""

from .routes import router

__all__ = ["router"]
