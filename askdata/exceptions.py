"""Error taxonomy for the query pipeline"""


class QueryServiceError(Exception):
    """Base class for pipeline failures that carry a stable error code"""

    error_code = "QUERY_SERVICE_ERROR"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class GenerationFailure(QueryServiceError):
    """The completion service errored or returned no usable query"""

    error_code = "SQL_GENERATION_ERROR"


class QueryRejected(QueryServiceError):
    """The SQL guard refused a candidate statement"""

    error_code = "SQL_REJECTED"

    def __init__(self, reason: str):
        super().__init__(f"Query rejected: {reason}")
        self.reason = reason


class TargetMissing(QueryServiceError):
    """The table the query refers to does not exist"""

    error_code = "TABLE_NOT_FOUND"

    def __init__(self, message: str, relation: str = None):
        super().__init__(message)
        self.relation = relation


class ExecutionError(QueryServiceError):
    """Any other datastore failure while running an authorized query"""

    error_code = "SQL_EXECUTION_ERROR"


class ExplanationFailure(QueryServiceError):
    """The SQL explanation could not be produced"""

    error_code = "EXPLANATION_ERROR"
