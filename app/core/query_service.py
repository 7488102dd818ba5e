import logging
from typing import Any, Mapping
from app.models.query_view import QueryView
from search.exceptions import QueryTooLongError
from search.flat import FlatQuery
from search.query import Query

logger = logging.getLogger(__name__)

DEFAULT_QUERY_MAX_LENGTH = 8192

class QueryService:
    def __init__(self, max_length: int = DEFAULT_QUERY_MAX_LENGTH):
        self.max_length = max_length
        self.parsed = 0
        self.built = 0

    def view(self, query: Query) -> QueryView:
        return QueryView(
            parameters=query.parameters,
            canonical=query.build(),
            typed=FlatQuery(query).to_dict()
        )

    def parse(self, query_string: str) -> QueryView:
        if len(query_string) > self.max_length:
            raise QueryTooLongError(
                details={"length": len(query_string), "max_length": self.max_length}
            )

        query = Query.parse(query_string)
        self.parsed += 1
        logger.info("Parsed query string into %d parameters", len(query.parameters))
        return self.view(query)

    def build(self, parameters: Mapping[str, str], typed: Mapping[str, Any]) -> QueryView:
        query = Query(parameters=parameters)
        FlatQuery(query).update(typed)
        self.built += 1
        logger.info("Built query from %d raw and %d typed parameters", len(parameters), len(typed))
        return self.view(query)

    def health_check(self):
        return {
            "parsed": self.parsed,
            "built": self.built,
            "max_length": self.max_length,
            "status": "ok"
        }
