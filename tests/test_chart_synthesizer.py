"""
Unit tests for chart configuration synthesis
"""

from unittest.mock import MagicMock, patch

import pytest
from pydantic import ValidationError

from askdata.core_api.chart_synthesizer import (
    NO_DATA_X_KEY,
    NO_DATA_Y_KEY,
    heuristic_chart_config,
    synthesize_chart_config,
)
from askdata.utils.chart_data import COLOR_PALETTE

QUESTION = "average package by department"


def _model_config(**overrides):
    config = {
        "type": "bar",
        "title": "Average Package by Department",
        "description": "Average package (LPA) for each department.",
        "takeaway": "CSE has the highest average package.",
        "xKey": "department",
        "yKeys": ["avg_package"],
        "legend": False,
    }
    config.update(overrides)
    return config


class TestSynthesizeChartConfig:
    """Test cases for synthesize_chart_config"""

    @pytest.mark.asyncio
    async def test_valid_model_output(self, make_llm, department_rows):
        """Test a valid configuration is returned with palette colors"""
        llm = make_llm(_model_config())

        with patch("askdata.core_api.chart_synthesizer.get_llm", return_value=llm):
            config = await synthesize_chart_config(department_rows, QUESTION)

        assert config.type == "bar"
        assert config.xKey == "department"
        assert config.yKeys == ["avg_package"]
        assert config.colors == {"avg_package": COLOR_PALETTE[0]}

    @pytest.mark.asyncio
    async def test_model_colors_are_discarded(self, make_llm, department_rows):
        llm = make_llm(_model_config(colors={"avg_package": "#ff0000"}))

        with patch("askdata.core_api.chart_synthesizer.get_llm", return_value=llm):
            config = await synthesize_chart_config(department_rows, QUESTION)

        assert config.colors == {"avg_package": COLOR_PALETTE[0]}

    @pytest.mark.asyncio
    async def test_type_is_normalized(self, make_llm, department_rows):
        llm = make_llm(_model_config(type=" Pie "))

        with patch("askdata.core_api.chart_synthesizer.get_llm", return_value=llm):
            config = await synthesize_chart_config(department_rows, QUESTION)

        assert config.type == "pie"

    @pytest.mark.asyncio
    async def test_foreign_measurement_column_is_dropped(self, make_llm):
        rows = [{"year": 2022, "department": "CSE", "placed": 10}]
        llm = make_llm(_model_config(
            type="line",
            xKey="year",
            yKeys=["placed"],
            multipleLines=True,
            measurementColumn="department",
            lineCategories=["CSE"],
        ))

        with patch("askdata.core_api.chart_synthesizer.get_llm", return_value=llm):
            config = await synthesize_chart_config(rows, "placements over time by department")

        assert config.measurementColumn is None
        assert config.lineCategories == ["CSE"]

    @pytest.mark.asyncio
    async def test_numeric_line_categories_are_kept(self, make_llm):
        """Test year categories sent as numbers keep the multi-line chart"""
        rows = [
            {"month": 1, "year": 2020, "placed": 4},
            {"month": 1, "year": 2021, "placed": 6},
        ]
        llm = make_llm(_model_config(
            type="line",
            title="Placements by month",
            xKey="month",
            yKeys=["placed"],
            legend=True,
            multipleLines=True,
            measurementColumn="placed",
            lineCategories=[2020, 2021],
        ))

        with patch("askdata.core_api.chart_synthesizer.get_llm", return_value=llm):
            config = await synthesize_chart_config(rows, "placements per month for 2020 and 2021")

        assert config.type == "line"
        assert config.title == "Placements by month"
        assert config.lineCategories == ["2020", "2021"]
        assert config.measurementColumn == "placed"

    @pytest.mark.asyncio
    async def test_bare_string_y_key_is_accepted(self, make_llm, department_rows):
        llm = make_llm(_model_config(yKeys="avg_package"))

        with patch("askdata.core_api.chart_synthesizer.get_llm", return_value=llm):
            config = await synthesize_chart_config(department_rows, QUESTION)

        assert config.title == "Average Package by Department"
        assert config.yKeys == ["avg_package"]
        assert config.colors == {"avg_package": COLOR_PALETTE[0]}

    @pytest.mark.asyncio
    async def test_duplicate_y_keys_collapse(self, make_llm, department_rows):
        llm = make_llm(_model_config(yKeys=["avg_package", "avg_package"]))

        with patch("askdata.core_api.chart_synthesizer.get_llm", return_value=llm):
            config = await synthesize_chart_config(department_rows, QUESTION)

        assert config.yKeys == ["avg_package"]
        assert list(config.colors) == ["avg_package"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("content", [
        "not json at all",
        '{"type": "bar"}',
        '{"type": "radar", "title": "t", "description": "d", "takeaway": "k", '
        '"xKey": "department", "yKeys": ["avg_package"], "legend": false}',
        '{"type": "bar", "title": "t", "description": "d", "takeaway": "k", '
        '"xKey": "department", "yKeys": [], "legend": false}',
    ])
    async def test_malformed_output_falls_back_to_heuristic(self, make_llm, department_rows, content):
        """Test invalid model output yields a bar chart over the first two columns"""
        llm = make_llm(content)

        with patch("askdata.core_api.chart_synthesizer.get_llm", return_value=llm):
            config = await synthesize_chart_config(department_rows, QUESTION)

        assert config.type == "bar"
        assert config.xKey == "department"
        assert config.yKeys == ["avg_package"]
        assert config.colors == {"avg_package": COLOR_PALETTE[0]}

    @pytest.mark.asyncio
    async def test_service_error_falls_back_to_heuristic(self, make_llm, department_rows):
        llm = make_llm(error=TimeoutError("model timed out"))

        with patch("askdata.core_api.chart_synthesizer.get_llm", return_value=llm):
            config = await synthesize_chart_config(department_rows, QUESTION)

        assert config.type == "bar"
        assert config.xKey == "department"

    @pytest.mark.asyncio
    async def test_empty_results_use_no_data_config(self):
        get_llm = MagicMock()

        with patch("askdata.core_api.chart_synthesizer.get_llm", get_llm):
            config = await synthesize_chart_config([], QUESTION)

        assert config.type == "bar"
        assert config.xKey == NO_DATA_X_KEY
        assert config.yKeys == [NO_DATA_Y_KEY]
        assert config.colors == {NO_DATA_Y_KEY: COLOR_PALETTE[0]}
        get_llm.assert_not_called()

    @pytest.mark.asyncio
    async def test_result_is_frozen(self, make_llm, department_rows):
        llm = make_llm(_model_config())

        with patch("askdata.core_api.chart_synthesizer.get_llm", return_value=llm):
            config = await synthesize_chart_config(department_rows, QUESTION)

        with pytest.raises(ValidationError):
            config.title = "changed"


class TestHeuristicChartConfig:
    """Test cases for the fallback configuration"""

    def test_single_column_uses_it_for_both_axes(self):
        config = heuristic_chart_config([{"count": 42}])

        assert config.xKey == "count"
        assert config.yKeys == ["count"]

    def test_uses_first_two_columns(self):
        config = heuristic_chart_config([{"a": 1, "b": 2, "c": 3}])

        assert config.xKey == "a"
        assert config.yKeys == ["b"]


if __name__ == "__main__":
    pytest.main([__file__])
