"""Top-level clause splitting for SQL explanations"""
import logging
import re
from typing import List, Optional, Tuple

import sqlparse
from sqlparse.sql import Where

logger = logging.getLogger(__name__)

# Keywords that open a new top-level clause
CLAUSE_KEYWORDS = (
    "WITH",
    "SELECT",
    "FROM",
    "JOIN",
    "INNER JOIN",
    "LEFT JOIN",
    "LEFT OUTER JOIN",
    "RIGHT JOIN",
    "RIGHT OUTER JOIN",
    "FULL JOIN",
    "FULL OUTER JOIN",
    "CROSS JOIN",
    "WHERE",
    "GROUP BY",
    "HAVING",
    "ORDER BY",
    "LIMIT",
    "OFFSET",
    "UNION",
    "UNION ALL",
    "INTERSECT",
    "EXCEPT",
)

_LONGEST_FIRST = sorted(CLAUSE_KEYWORDS, key=len, reverse=True)


def normalize_clause(text: str) -> str:
    """Collapse whitespace and upper-case, for comparing clause text"""
    return re.sub(r"\s+", " ", text.strip()).upper()


def clause_keyword(text: str) -> Optional[str]:
    """
    Return the clause keyword a piece of SQL (or a section label) starts with.

    Args:
        text: SQL fragment or explanation section label

    Returns:
        Matching keyword, or None
    """
    normalized = normalize_clause(text)
    for keyword in _LONGEST_FIRST:
        if normalized == keyword or normalized.startswith(keyword + " ") or normalized.startswith(keyword + "("):
            return keyword
    return None


def split_clauses(sql: str) -> List[Tuple[str, str]]:
    """
    Split the first statement of a query into its top-level clauses.

    Subqueries stay inside the clause that contains them.

    Args:
        sql: SQL query

    Returns:
        (keyword, clause_text) pairs in query order
    """
    statements = sqlparse.parse(sql or "")
    if not statements:
        return []

    clauses: List[Tuple[str, List[str]]] = []
    for token in statements[0].tokens:
        keyword = None
        if isinstance(token, Where):
            keyword = "WHERE"
        elif token.is_keyword:
            normalized = normalize_clause(token.value)
            if normalized in CLAUSE_KEYWORDS:
                keyword = normalized

        if keyword is not None:
            clauses.append((keyword, [token.value]))
        elif clauses:
            clauses[-1][1].append(token.value)

    result = []
    for keyword, parts in clauses:
        clause_text = re.sub(r"\s+", " ", "".join(parts)).strip().rstrip(";").strip()
        result.append((keyword, clause_text))
    return result
