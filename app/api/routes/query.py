from fastapi import APIRouter, Request
from app.models.query_view import BuildRequest, ParseRequest, QueryView
from app.models.api_response import APIResponse, Meta
from time import perf_counter

router = APIRouter()

def _respond(view: QueryView, start_time: float, request: Request) -> APIResponse[QueryView]:
    took_ms = (perf_counter() - start_time) * 1000

    return APIResponse(
        status="ok",
        data=view,
        meta=Meta(
            took_ms=round(took_ms, 2),
            parameter_count=len(view.parameters),
            request_id=request.headers.get("X-Request-Id")
        )
    )

@router.post("/parse", response_model=APIResponse[QueryView])
def parse(request: Request, body: ParseRequest):
    service = request.app.state.query_service
    start_time = perf_counter()

    view = service.parse(body.query_string)
    return _respond(view, start_time, request)

@router.post("/build", response_model=APIResponse[QueryView])
def build(request: Request, body: BuildRequest):
    service = request.app.state.query_service
    start_time = perf_counter()

    view = service.build(body.parameters, body.typed)
    return _respond(view, start_time, request)

@router.get("/health", response_model=APIResponse)
def health(request: Request):
    service = request.app.state.query_service

    return APIResponse(
        status="ok",
        data=service.health_check()
    )
