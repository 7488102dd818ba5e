"""
Primitive-only view of a Query, for consumers that speak plain JSON.

Every value goes through the Query's typed attributes; this module only
flattens rich types (enums, geo models, tagged unions) into strings, numbers,
lists and dicts and back.
"""
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional

from pydantic import BaseModel, TypeAdapter, ValidationError

from models.geo import GeoPoint, GeoRect
from models.parameters import (
    AROUND_RADIUS_ALL,
    AROUND_RADIUS_ALL_VALUE,
    AllRadius,
    AllStopWords,
    AlternativesAsExact,
    ExactOnSingleWordQuery,
    ExplicitRadius,
    QueryType,
    RemoveWordsIfNoResults,
    SelectedStopWords,
    TypoTolerance,
)
from search.codecs import parse_enum
from search.exceptions import InvalidParameterError
from search.query import Query

_ENUMS = {
    "query_type": QueryType,
    "typo_tolerance": TypoTolerance,
    "remove_words_if_no_results": RemoveWordsIfNoResults,
    "exact_on_single_word_query": ExactOnSingleWordQuery,
}

_ENUM_LISTS = {
    "alternatives_as_exact": AlternativesAsExact,
}

_POINT = TypeAdapter(GeoPoint)
_POINTS = TypeAdapter(List[GeoPoint])
_RECTS = TypeAdapter(List[GeoRect])

def flatten(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, AllStopWords):
        return value.enabled
    if isinstance(value, SelectedStopWords):
        return list(value.languages)
    if isinstance(value, AllRadius):
        return AROUND_RADIUS_ALL_VALUE
    if isinstance(value, ExplicitRadius):
        return value.meters
    if isinstance(value, BaseModel):
        return value.model_dump()
    if isinstance(value, list):
        return [flatten(item) for item in value]
    return value

def _invalid(attr: str, value: Any, reason: str) -> InvalidParameterError:
    return InvalidParameterError(
        f"Invalid value for '{attr}': {reason}", details={"parameter": attr, "value": repr(value)}
    )

def _enum(attr: str, value: Any):
    if not isinstance(value, str):
        raise _invalid(attr, value, "expected a string")
    # unknown tags clear the parameter instead of failing
    return parse_enum(_ENUMS[attr], value)

def _enum_list(attr: str, value: Any):
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise _invalid(attr, value, "expected a list of strings")
    enum_cls = _ENUM_LISTS[attr]
    members = [parse_enum(enum_cls, v) for v in value]
    return [m for m in members if m is not None]

def _remove_stop_words(attr: str, value: Any):
    if isinstance(value, bool):
        return AllStopWords(enabled=value)
    if isinstance(value, list) and all(isinstance(v, str) for v in value):
        return SelectedStopWords(languages=value)
    raise _invalid(attr, value, "expected a boolean or a list of language codes")

def _around_radius(attr: str, value: Any):
    if value == AROUND_RADIUS_ALL_VALUE:
        return AROUND_RADIUS_ALL
    if isinstance(value, int) and not isinstance(value, bool):
        try:
            return ExplicitRadius(meters=value)
        except ValidationError as e:
            raise _invalid(attr, value, "radius out of range") from e
    raise _invalid(attr, value, f'expected an integer or "{AROUND_RADIUS_ALL_VALUE}"')

def _validated(adapter: TypeAdapter):
    def convert(attr: str, value: Any):
        try:
            return adapter.validate_python(value)
        except ValidationError as e:
            raise _invalid(attr, value, str(e.errors()[0]["msg"])) from e
    return convert

_CONVERTERS = {
    **{attr: _enum for attr in _ENUMS},
    **{attr: _enum_list for attr in _ENUM_LISTS},
    "remove_stop_words": _remove_stop_words,
    "around_radius": _around_radius,
    "around_lat_lng": _validated(_POINT),
    "inside_bounding_box": _validated(_RECTS),
    "inside_polygon": _validated(_POINTS),
}

class FlatQuery:
    """Wraps a Query and exposes its typed parameters as JSON primitives."""

    def __init__(self, query: Optional[Query] = None):
        self.query = query if query is not None else Query()

    def get(self, attr: str) -> Any:
        self._check(attr)
        value = getattr(self.query, attr)
        return None if value is None else flatten(value)

    def set(self, attr: str, value: Any) -> None:
        self._check(attr)
        if value is not None:
            converter = _CONVERTERS.get(attr)
            if converter is not None:
                value = converter(attr, value)
        setattr(self.query, attr, value)

    def update(self, values: Mapping[str, Any]) -> None:
        """Set several parameters at once; nothing is written if any of them is invalid."""
        staged = FlatQuery(self.query.copy())
        for attr, value in values.items():
            staged.set(attr, value)

        for name in set(self.query.parameters) | set(staged.query.parameters):
            self.query.set(name, staged.query.get(name))

    def to_dict(self) -> Dict[str, Any]:
        flat = {}
        for attr in Query.TYPED_PARAMETERS:
            value = self.get(attr)
            if value is not None:
                flat[attr] = value
        return flat

    @staticmethod
    def _check(attr: str) -> None:
        if attr not in Query.TYPED_PARAMETERS:
            raise InvalidParameterError(
                f"Unknown typed parameter '{attr}'", details={"parameter": attr}
            )
