from pydantic import BaseModel, Field
from typing import Any, Dict

class ParseRequest(BaseModel):
    query_string: str = Field(
        ...,
        description="URL query string, e.g. taken from a deep link"
    )

class BuildRequest(BaseModel):
    parameters: Dict[str, str] = Field(
        default_factory=dict,
        description="Raw parameters, applied first"
    )

    typed: Dict[str, Any] = Field(
        default_factory=dict,
        description="Typed parameters by attribute name (e.g. hits_per_page), applied second"
    )

class QueryView(BaseModel):
    parameters: Dict[str, str]
    canonical: str
    typed: Dict[str, Any]
