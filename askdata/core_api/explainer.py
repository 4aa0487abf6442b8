"""Clause-by-clause SQL explanation"""
import logging
from typing import Dict, List, Tuple

from pydantic import ValidationError

from ..config import settings
from ..exceptions import ExplanationFailure
from ..models import ExplanationSection, QueryExplanation
from ..prompts.explanation import EXPLANATION_SYSTEM_PROMPT, create_explanation_prompt
from ..services.ollama_client import get_llm
from ..utils.json_encoder import parse_json_response
from ..utils.sql_clauses import clause_keyword, normalize_clause, split_clauses

logger = logging.getLogger(__name__)


def ensure_clause_coverage(sections: List[ExplanationSection], sql: str) -> List[ExplanationSection]:
    """
    Insert an empty-explanation section for every clause the model skipped.

    Model sections keep their order and are never removed. A missing clause
    is placed after the last section belonging to the same or an earlier
    clause.

    Args:
        sections: Sections returned by the model
        sql: The explained query

    Returns:
        Sections covering every top-level clause of the query
    """
    clauses = split_clauses(sql)
    matched = _match_sections(sections, clauses)

    missing = [index for index in range(len(clauses)) if index not in matched.values()]
    if not missing:
        return list(sections)

    logger.info(f"Adding {len(missing)} clause(s) missing from the explanation")

    # Effective clause position of each model section; unmatched sections
    # belong to the clause before them
    ranked = []
    current = -1
    for position, section in enumerate(sections):
        current = matched.get(position, current)
        ranked.append((current, section))

    for clause_index in missing:
        insert_at = 0
        for index, (section_rank, _) in enumerate(ranked):
            if section_rank <= clause_index:
                insert_at = index + 1
        text = clauses[clause_index][1]
        ranked.insert(insert_at, (clause_index, ExplanationSection(section=text, explanation="")))

    return [section for _, section in ranked]


def _match_sections(
    sections: List[ExplanationSection],
    clauses: List[Tuple[str, str]]
) -> Dict[int, int]:
    """
    Pair model sections with clause occurrences.

    A section claims the first unclaimed clause with its keyword whose text
    it matches (equal, or one a prefix of the other), else the first
    unclaimed clause with its keyword. Repeated keywords (two JOINs, both
    halves of a UNION) are therefore covered one occurrence at a time.

    Returns:
        Section position -> clause index
    """
    normalized = [normalize_clause(text) for _, text in clauses]
    matched: Dict[int, int] = {}
    claimed = set()

    for position, section in enumerate(sections):
        keyword = clause_keyword(section.section)
        if keyword is None:
            continue
        candidates = [
            index for index, (clause_kw, _) in enumerate(clauses)
            if clause_kw == keyword and index not in claimed
        ]
        if not candidates:
            continue
        label = normalize_clause(section.section)
        by_text = [
            index for index in candidates
            if normalized[index].startswith(label) or label.startswith(normalized[index])
        ]
        index = (by_text or candidates)[0]
        claimed.add(index)
        matched[position] = index

    return matched


async def explain_query(question: str, sql: str) -> QueryExplanation:
    """
    Explain a generated query clause by clause for a non-expert.

    Args:
        question: Original natural language question
        sql: Generated SQL

    Returns:
        Explanation covering every top-level clause

    Raises:
        ExplanationFailure: If the model errors or its output does not validate
    """
    messages = [
        {"role": "system", "content": EXPLANATION_SYSTEM_PROMPT},
        {"role": "user", "content": create_explanation_prompt(question, sql)}
    ]

    try:
        llm = get_llm(model=settings.OLLAMA_SQL_MODEL, temperature=0.2, json_mode=True)
        response = await llm.ainvoke(messages)
    except Exception as e:
        logger.exception("Explanation call failed")
        raise ExplanationFailure(f"Failed to generate query explanation: {e}") from e

    response_text = response.content if hasattr(response, "content") else str(response)

    try:
        payload = parse_json_response(response_text)
        if isinstance(payload, list):
            payload = {"explanations": payload}
        explanation = QueryExplanation.model_validate(payload)
    except (ValidationError, ValueError) as e:
        raise ExplanationFailure(f"Failed to generate query explanation: {e}") from e

    sections = ensure_clause_coverage(explanation.explanations, sql)
    return QueryExplanation(explanations=sections)
