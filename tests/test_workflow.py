"""
Integration tests for the question answering workflow with stubbed model and datastore
"""

from decimal import Decimal
from unittest.mock import MagicMock, patch

import pytest
from sqlalchemy.exc import ProgrammingError

from askdata.utils.chart_data import COLOR_PALETTE
from askdata.workflow import run_query_pipeline
from askdata.workflow.query_workflow import check_for_errors, route_after_execution

QUESTION = "average package by department"
SQL = "SELECT department, AVG(package_lpa) AS avg_package FROM placements GROUP BY department"

CHART_CONFIG = {
    "type": "bar",
    "title": "Average Package by Department",
    "description": "Average package (LPA) for each department.",
    "takeaway": "CSE leads on average package.",
    "xKey": "department",
    "yKeys": ["avg_package"],
    "legend": False,
}

EXPLANATIONS = {"explanations": [
    {"section": "SELECT department, AVG(package_lpa) AS avg_package",
     "explanation": "Shows each department with its average package."},
    {"section": "FROM placements", "explanation": "Reads the placements table."},
    {"section": "GROUP BY department", "explanation": "One row per department."},
]}


class TestRouting:
    """Test cases for the routing functions"""

    def test_check_for_errors(self):
        assert check_for_errors({"error": "boom"}) == "error"
        assert check_for_errors({}) == "continue"

    def test_route_after_execution_fans_out(self):
        assert route_after_execution({"query_results": []}) == ["chart", "explain"]
        assert route_after_execution({"error": "boom"}) == ["error"]


class TestRunQueryPipeline:
    """End-to-end runs of the compiled workflow"""

    def setup_method(self):
        self.db = MagicMock()
        self.db.execute_query.return_value = [
            {"department": "CSE", "avg_package": Decimal("8.50")},
            {"department": "ECE", "avg_package": Decimal("6.25")},
        ]

    def _run(self, make_llm, sql_content, chart_content=CHART_CONFIG, explain_llm=None, table_name=None):
        patches = [
            patch("askdata.core_api.service.get_llm", return_value=make_llm(sql_content)),
            patch("askdata.core_api.chart_synthesizer.get_llm", return_value=make_llm(chart_content)),
            patch("askdata.core_api.explainer.get_llm",
                  return_value=explain_llm or make_llm(EXPLANATIONS)),
            patch("askdata.core_api.service.get_postgres_client", return_value=self.db),
            patch("askdata.utils.schema.get_postgres_client", return_value=self.db),
        ]
        for p in patches:
            p.start()
        self._patches = patches
        return run_query_pipeline(QUESTION, table_name=table_name, query_id="q-1")

    def teardown_method(self):
        for p in getattr(self, "_patches", []):
            p.stop()

    @pytest.mark.asyncio
    async def test_average_package_by_department(self, make_llm):
        """Test the happy path returns SQL, rows, chart and explanation"""
        response = await self._run(make_llm, {"query": SQL})

        assert response.success is True
        assert response.queryId == "q-1"
        assert response.sqlQuery == SQL
        assert response.results == [
            {"department": "CSE", "avg_package": 8.5},
            {"department": "ECE", "avg_package": 6.25},
        ]
        assert response.columns == ["department", "avg_package"]
        assert response.chartConfig.type == "bar"
        assert response.chartConfig.colors == {"avg_package": COLOR_PALETTE[0]}
        assert response.chartData == response.results
        assert [s.section for s in response.explanations] == [
            "SELECT department, AVG(package_lpa) AS avg_package",
            "FROM placements",
            "GROUP BY department",
        ]
        assert response.explanationError is None
        self.db.execute_query.assert_called_once_with(SQL)

    @pytest.mark.asyncio
    async def test_rejected_sql_is_not_executed(self, make_llm):
        response = await self._run(make_llm, {"query": "DELETE FROM placements"})

        assert response.success is False
        assert response.errorCode == "SQL_REJECTED"
        assert response.sqlQuery == "DELETE FROM placements"
        self.db.execute_query.assert_not_called()

    @pytest.mark.asyncio
    async def test_missing_table(self, make_llm):
        self.db.execute_query.side_effect = ProgrammingError(
            SQL, {}, Exception('relation "placements" does not exist')
        )

        response = await self._run(make_llm, {"query": SQL})

        assert response.success is False
        assert response.errorCode == "TABLE_NOT_FOUND"
        assert "placements" in response.error
        assert response.chartConfig is None

    @pytest.mark.asyncio
    async def test_generation_failure(self, make_llm):
        response = await self._run(make_llm, "I cannot help with that")

        assert response.success is False
        assert response.errorCode == "SQL_GENERATION_ERROR"
        self.db.execute_query.assert_not_called()

    @pytest.mark.asyncio
    async def test_explanation_failure_keeps_chart_and_rows(self, make_llm):
        failing = make_llm(error=ConnectionError("ollama unreachable"))

        response = await self._run(make_llm, {"query": SQL}, explain_llm=failing)

        assert response.success is True
        assert len(response.results) == 2
        assert response.chartConfig.xKey == "department"
        assert response.explanations is None
        assert "ollama unreachable" in response.explanationError

    @pytest.mark.asyncio
    async def test_chart_fallback_keeps_pipeline_successful(self, make_llm):
        response = await self._run(make_llm, {"query": SQL}, chart_content="garbage")

        assert response.success is True
        assert response.chartConfig.type == "bar"
        assert response.chartConfig.title == "Query Results"

    @pytest.mark.asyncio
    async def test_uploaded_table(self, make_llm):
        self.db.get_table_columns.return_value = [
            ("city", "text", True),
            ("salary", "numeric", True),
        ]
        self.db.execute_query.return_value = [{"city": "Pune", "avg_salary": 12.0}]
        sql = "SELECT city, AVG(salary) AS avg_salary FROM __UPLOADED_TABLE__ GROUP BY city"

        response = await self._run(make_llm, {"query": sql}, table_name="csv_data_1700000000000")

        assert response.success is True
        assert response.sqlQuery == (
            "SELECT city, AVG(salary) AS avg_salary FROM csv_data_1700000000000 GROUP BY city"
        )
        self.db.get_table_columns.assert_called_once_with("csv_data_1700000000000")

    @pytest.mark.asyncio
    async def test_unknown_uploaded_table(self, make_llm):
        self.db.get_table_columns.return_value = []

        response = await self._run(make_llm, {"query": SQL}, table_name="csv_data_1")

        assert response.success is False
        assert response.errorCode == "TABLE_NOT_FOUND"
        self.db.execute_query.assert_not_called()

    @pytest.mark.asyncio
    async def test_unsafe_table_name(self, make_llm):
        response = await self._run(make_llm, {"query": SQL}, table_name="x; drop table y")

        assert response.success is False
        assert response.errorCode == "INVALID_TABLE_NAME"


if __name__ == "__main__":
    pytest.main([__file__])
