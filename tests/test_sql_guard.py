"""
Unit tests for the static SQL guard
"""

import pytest

from askdata.utils.sql_guard import authorize, BLOCKED_KEYWORDS


class TestAuthorize:
    """Test cases for authorize"""

    def test_accepts_plain_select(self):
        """Test a simple SELECT is accepted"""
        decision = authorize("SELECT id FROM placements")

        assert decision.accepted is True
        assert decision.reason is None

    def test_accepts_select_with_surrounding_whitespace_and_mixed_case(self):
        """Test leading/trailing whitespace and case are ignored"""
        decision = authorize("  \n\tSeLeCt department, AVG(package_lpa) FROM placements GROUP BY department  \n")

        assert decision.accepted is True

    @pytest.mark.parametrize("sql", [
        "WITH t AS (SELECT 1) SELECT * FROM t",
        "EXPLAIN SELECT * FROM placements",
        "",
        "   ",
        "-- comment\nSELECT 1",
    ])
    def test_rejects_text_not_starting_with_select(self, sql):
        """Test anything not starting with select is rejected"""
        decision = authorize(sql)

        assert decision.accepted is False
        assert "Only SELECT" in decision.reason

    def test_rejects_none(self):
        """Test a missing candidate is rejected rather than raising"""
        assert authorize(None).accepted is False

    @pytest.mark.parametrize("keyword", BLOCKED_KEYWORDS)
    def test_rejects_each_blocked_keyword_anywhere(self, keyword):
        """Test every denylisted keyword rejects, regardless of case and position"""
        sql = f"select * from placements where note = 'x'; {keyword.upper()} table placements"

        decision = authorize(sql)

        assert decision.accepted is False
        assert keyword in decision.reason

    def test_rejects_select_followed_by_drop(self):
        """Test chained destructive statement is rejected"""
        assert authorize("SELECT 1; DROP TABLE placements").accepted is False

    def test_substring_match_rejects_created_column(self):
        """Test the documented false positive: 'created' contains 'create'"""
        decision = authorize("select * from t where name ilike 'created%'")

        assert decision.accepted is False
        assert "create" in decision.reason

    def test_substring_match_rejects_updated_at_column(self):
        """Test column names containing 'update' are rejected too"""
        assert authorize("SELECT updated_at FROM placements").accepted is False

    def test_is_pure(self):
        """Test repeated calls give the same answer"""
        sql = "SELECT department FROM placements"

        assert authorize(sql) == authorize(sql)


class TestSingleStatementMode:
    """Test cases for the optional single-statement hardening"""

    def test_off_by_default_accepts_two_selects(self):
        """Test multi-statement SELECT text passes the textual contract"""
        assert authorize("SELECT 1; SELECT 2").accepted is True

    def test_on_rejects_two_selects(self):
        """Test multi-statement text is rejected when enabled"""
        decision = authorize("SELECT 1; SELECT 2", single_statement=True)

        assert decision.accepted is False
        assert "single" in decision.reason

    def test_on_accepts_trailing_semicolon(self):
        """Test a single statement with a trailing semicolon passes"""
        assert authorize("SELECT 1;", single_statement=True).accepted is True
