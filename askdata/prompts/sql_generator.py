"""Prompts for SQL generation"""
from typing import Optional

from ..models import SchemaDescriptor
from ..utils.schema import PLACEMENTS_SCHEMA, TABLE_PLACEHOLDER

SQL_GENERATOR_SYSTEM_PROMPT = """You are a SQL (postgres) and data visualization expert. Your job is to help the user write a SQL query to retrieve the data they need.

The table schema is as follows:

{schema}
{table_note}
**Rules:**
1. Only retrieval (SELECT) queries are allowed. Never write INSERT, UPDATE, DELETE, DROP, ALTER, TRUNCATE, CREATE, GRANT or REVOKE.
2. Use only the columns listed in the schema.
3. For text fields ({text_columns}) use case-insensitive pattern matching:
   LOWER(field_name) ILIKE LOWER('%search_term%')
4. When the user asks about something 'over time', return data grouped by year if appropriate.
5. EVERY QUERY SHOULD RETURN QUANTITATIVE DATA THAT CAN BE PLOTTED ON A CHART!
   There must be at least one numeric or aggregate column.
   If the user asks for a single column, return that column and a count or numeric measure.
6. If the user asks for a rate or percentage, return it as a decimal between 0 and 1 (e.g., 0.1 = 10%).
7. Write a single statement without a trailing semicolon.

**Output Format:**
Return ONLY valid JSON:
{{"query": "SELECT ..."}}"""

PLACEHOLDER_NOTE = """
The table has no fixed name. Write the table name exactly as {placeholder} wherever it is needed,
e.g. SELECT column, COUNT(*) AS count FROM {placeholder} GROUP BY column
"""

SQL_GENERATOR_USER_PROMPT = """Generate the query necessary to retrieve the data the user wants: {question}"""


def create_sql_system_prompt(schema: Optional[SchemaDescriptor] = None) -> str:
    """
    Create the system prompt binding the model to a schema.

    Args:
        schema: Descriptor of an uploaded table; None for the placements table

    Returns:
        System prompt string
    """
    if schema is None:
        schema_text = PLACEMENTS_SCHEMA.describe()
        table_note = ""
        text_columns = [c.name for c in PLACEMENTS_SCHEMA.columns if c.type == "text"]
    else:
        schema_text = schema.describe(table_label=TABLE_PLACEHOLDER)
        table_note = PLACEHOLDER_NOTE.format(placeholder=TABLE_PLACEHOLDER)
        text_columns = [c.name for c in schema.columns if c.type == "text"]

    return SQL_GENERATOR_SYSTEM_PROMPT.format(
        schema=schema_text,
        table_note=table_note,
        text_columns=", ".join(text_columns) or "any text column",
    )


def create_sql_generation_prompt(question: str) -> str:
    """Create the user prompt for one question"""
    return SQL_GENERATOR_USER_PROMPT.format(question=question.strip())
