"""Static safety gate for generated SQL

The gate is a textual denylist: a statement is accepted only if it starts with
SELECT and contains none of the mutating/DDL keywords anywhere in its text.
Substring matching is deliberate and over-rejects identifiers such as
``created_at`` (contains "create") or ``grant_amount`` (contains "grant").

The denylist is a last line of defense. The datastore connection should also
use read-only credentials.
"""
import logging
from typing import Optional

import sqlparse

from ..config import settings
from ..models import GuardDecision

logger = logging.getLogger(__name__)

BLOCKED_KEYWORDS = (
    "drop",
    "delete",
    "insert",
    "update",
    "alter",
    "truncate",
    "create",
    "grant",
    "revoke",
)


def authorize(candidate_sql: str, single_statement: Optional[bool] = None) -> GuardDecision:
    """
    Accept or reject a candidate SQL string before execution.

    Only a trimmed, lower-cased working copy is inspected; callers execute
    the original text.

    Args:
        candidate_sql: SQL text produced by the generator
        single_statement: Also reject multi-statement text
            (defaults to settings.SQL_GUARD_SINGLE_STATEMENT)

    Returns:
        GuardDecision with the rejection reason when refused
    """
    normalized = (candidate_sql or "").strip().lower()

    if not normalized.startswith("select"):
        logger.warning("Rejected SQL: does not start with SELECT")
        return GuardDecision(accepted=False, reason="Only SELECT queries are allowed")

    for keyword in BLOCKED_KEYWORDS:
        if keyword in normalized:
            logger.warning(f"Rejected SQL: blocked keyword '{keyword}'")
            return GuardDecision(
                accepted=False,
                reason=f"Only SELECT queries are allowed (found blocked keyword '{keyword}')"
            )

    if single_statement is None:
        single_statement = settings.SQL_GUARD_SINGLE_STATEMENT

    if single_statement:
        statements = [s for s in sqlparse.split(candidate_sql) if s.strip().strip(";").strip()]
        if len(statements) > 1:
            logger.warning(f"Rejected SQL: {len(statements)} statements")
            return GuardDecision(accepted=False, reason="Only a single SELECT statement is allowed")

    return GuardDecision(accepted=True)
