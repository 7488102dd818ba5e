import logging
import os
from fastapi import FastAPI
from contextlib import asynccontextmanager

from app.core.query_service import QueryService, DEFAULT_QUERY_MAX_LENGTH
from app.api.routes import query
from app.api.errors import query_error_handler
from search.exceptions import QueryError

def _env_int(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, str(default)))
    except ValueError:
        return default

@asynccontextmanager
async def lifespan(app: FastAPI):
    logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO").upper())
    app.state.query_service = QueryService(
        max_length=_env_int("QUERY_MAX_LENGTH", DEFAULT_QUERY_MAX_LENGTH)
    )
    yield


app = FastAPI(
    title="Search Query Inspector",
    lifespan=lifespan,
)

app.include_router(query.router, prefix="/query", tags=["query"])
app.add_exception_handler(QueryError, query_error_handler)
