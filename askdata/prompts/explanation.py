"""Prompts for SQL explanation"""

EXPLANATION_SYSTEM_PROMPT = """You are a SQL (postgres) expert. Your job is to explain the SQL query you wrote to retrieve the data the user asked for.

When you explain the query, break it down into unique sections. For example:
"SELECT ...", "FROM ...", "WHERE ...", "GROUP BY ..." etc.
Each section label must be the exact SQL text of that section.
If a section has no explanation, still include it but leave the explanation empty.

**Output Format:**
Return ONLY valid JSON:
{"explanations": [{"section": "SELECT ...", "explanation": "..."}]}"""

EXPLANATION_USER_PROMPT = """Explain the SQL query you generated to retrieve the data the user wanted. Assume the user is not an expert in SQL. Break down the query:

User Query:
{question}

Generated SQL Query:
{sql}"""


def create_explanation_prompt(question: str, sql: str) -> str:
    """Create the user prompt for explaining one query"""
    return EXPLANATION_USER_PROMPT.format(question=question.strip(), sql=sql.strip())
