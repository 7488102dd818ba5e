class QueryError(Exception):
    code = "QUERY_ERROR"
    message = "Query parameter error"

    def __init__(self, message: str | None = None, details=None):
        self.message = message or self.message
        self.details = details
        super().__init__(self.message)

class InvalidParameterError(QueryError, ValueError):
    """
    Raised when a typed writer is handed a value it cannot represent.
    This is caller misuse, never the result of decoding external input.
    """
    code = "INVALID_PARAMETER"
    message = "The parameter value cannot be encoded"

class QueryTooLongError(QueryError):
    code = "QUERY_TOO_LONG"
    message = "The query string exceeds the configured maximum length"
