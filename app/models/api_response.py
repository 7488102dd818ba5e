from pydantic import BaseModel
from typing import Generic, TypeVar, Optional, Any

T = TypeVar('T')

class APIError(BaseModel):
    code: str
    message: str
    details: Optional[Any] = None

class Meta(BaseModel):
    took_ms: Optional[float] = None
    parameter_count: Optional[int] = None
    request_id: Optional[str] = None

class APIResponse(BaseModel, Generic[T]):
    status: str
    data: Optional[T] = None
    meta: Optional[Meta] = None
    error: Optional[APIError] = None
