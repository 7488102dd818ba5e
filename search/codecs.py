"""
Encode/decode pairs for typed query parameters.

Every ``build_*`` function turns a typed value into the string stored in the
parameter set (or None to clear it); every ``parse_*`` function does the
reverse and returns None when the stored string does not decode. Decoding
never raises: the service validates parameters on its side, so a value we
cannot interpret is simply not visible through the typed view. Encoding
raises InvalidParameterError when the caller hands in a value that has no
string form.
"""
import math
import re
from enum import Enum
from typing import Any, Callable, List, NamedTuple, Optional, Sequence, Type, TypeVar

from pydantic import TypeAdapter, ValidationError
from pydantic_core import PydanticSerializationError

from models.geo import GeoPoint, GeoRect
from models.parameters import (
    AROUND_RADIUS_ALL,
    AROUND_RADIUS_ALL_VALUE,
    UINT_MAX,
    AllRadius,
    AllStopWords,
    AroundRadius,
    ExplicitRadius,
    RemoveStopWords,
    SelectedStopWords,
)
from search.exceptions import InvalidParameterError

E = TypeVar("E", bound=Enum)

MIN_POLYGON_POINTS = 3

INT_MIN = -(2**63)
INT_MAX = 2**63 - 1

_UINT_RE = re.compile(r"\+?[0-9]+")
_INT_RE = re.compile(r"[+-]?[0-9]+")
_FLOAT_RE = re.compile(r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")

_STRING_LIST = TypeAdapter(List[str])
_JSON_LIST = TypeAdapter(List[Any])

class Codec(NamedTuple):
    encode: Callable[[Any], Optional[str]]
    decode: Callable[[Optional[str]], Any]

# --- unsigned integers ---

def build_uint(value: Optional[int]) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidParameterError(
            "Expected an unsigned integer", details={"value": repr(value)}
        )
    if value < 0 or value > UINT_MAX:
        raise InvalidParameterError(
            "Unsigned integer out of range", details={"value": value}
        )
    return str(value)

def parse_uint(string: Optional[str]) -> Optional[int]:
    if string is None or not _UINT_RE.fullmatch(string):
        return None
    digits = string.lstrip("+").lstrip("0")
    if len(digits) > len(str(UINT_MAX)):
        return None
    value = int(digits or "0")
    if value > UINT_MAX:
        return None
    return value

# --- booleans ---

def build_bool(value: Optional[bool]) -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, bool):
        raise InvalidParameterError("Expected a boolean", details={"value": repr(value)})
    return "true" if value else "false"

def parse_bool(string: Optional[str]) -> Optional[bool]:
    """
    "true"/"false" in any case; otherwise an integer, where anything but
    zero is true. Everything else ("yes", "", "1.0") is not a boolean.
    """
    if string is None:
        return None

    lowered = string.lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    if _INT_RE.fullmatch(string):
        digits = string.lstrip("+-").lstrip("0")
        if len(digits) > len(str(INT_MAX)):
            return None
        sign = -1 if string.startswith("-") else 1
        value = sign * int(digits or "0")
        # out of the signed 64-bit range is not a number at all
        if value < INT_MIN or value > INT_MAX:
            return None
        return value != 0
    return None

# --- string enumerations ---

def build_enum(enum_cls: Type[E], value) -> Optional[str]:
    if value is None:
        return None
    try:
        return enum_cls(value).value
    except ValueError as e:
        raise InvalidParameterError(
            f"Unknown {enum_cls.__name__} value",
            details={"value": repr(value), "allowed": [m.value for m in enum_cls]}
        ) from e

def parse_enum(enum_cls: Type[E], string: Optional[str]) -> Optional[E]:
    if string is None:
        return None
    for member in enum_cls:
        if member.value == string:
            return member
    return None

def build_enum_list(enum_cls: Type[E], values: Optional[Sequence]) -> Optional[str]:
    if values is None:
        return None
    return build_string_array([build_enum(enum_cls, v) for v in values])

def parse_enum_list(enum_cls: Type[E], string: Optional[str]) -> Optional[List[E]]:
    raw_values = parse_string_array(string)
    if raw_values is None:
        return None

    values = []
    for raw in raw_values:
        member = parse_enum(enum_cls, raw)
        if member is not None:
            values.append(member)
    return values

# --- string arrays ---

def build_string_array(values: Optional[Sequence[str]]) -> Optional[str]:
    """Comma-joined form, used where the service expects a plain list."""
    if values is None:
        return None
    return ",".join(values)

def build_json_string_array(values: Optional[Sequence[str]]) -> Optional[str]:
    if values is None:
        return None
    if isinstance(values, str) or any(not isinstance(v, str) for v in values):
        raise InvalidParameterError("Expected a list of strings", details={"value": repr(values)})
    return build_json_array(list(values))

def parse_string_array(string: Optional[str]) -> Optional[List[str]]:
    """
    Accepts either a JSON array of strings or a comma separated list.
    The JSON notation wins when both would apply.
    """
    if string is None:
        return None

    try:
        return _STRING_LIST.validate_json(string, strict=True)
    except ValidationError:
        pass

    if string == "":
        return []
    return string.split(",")

# --- generic JSON arrays ---

def _has_non_finite(value: Any) -> bool:
    if isinstance(value, float):
        return not math.isfinite(value)
    if isinstance(value, dict):
        return any(_has_non_finite(v) for v in value.values())
    if isinstance(value, (list, tuple)):
        return any(_has_non_finite(v) for v in value)
    return False

def build_json_array(values: Optional[Sequence[Any]]) -> Optional[str]:
    if values is None:
        return None
    # JSON has no NaN or infinity; pydantic would silently write null
    if _has_non_finite(list(values)):
        raise InvalidParameterError(
            "JSON arrays cannot hold NaN or infinite numbers", details={"value": repr(values)}
        )
    try:
        return _JSON_LIST.dump_json(list(values)).decode("utf-8")
    except (PydanticSerializationError, TypeError) as e:
        raise InvalidParameterError(
            "Value is not JSON serializable", details={"value": repr(values)}
        ) from e

def parse_json_array(string: Optional[str]) -> Optional[List[Any]]:
    if string is None:
        return None
    try:
        return _JSON_LIST.validate_json(string)
    except ValidationError:
        return None

# --- geo ---

def _format_coordinate(value: float) -> str:
    return repr(float(value))

def _parse_coordinates(string: str) -> Optional[List[float]]:
    fields = string.split(",")
    if not all(_FLOAT_RE.fullmatch(f) for f in fields):
        return None
    return [float(f) for f in fields]

def _point(lat: float, lng: float) -> Optional[GeoPoint]:
    try:
        return GeoPoint(lat=lat, lng=lng)
    except ValidationError:
        # overflows such as "1e999" parse to inf
        return None

def build_lat_lng(point: Optional[GeoPoint]) -> Optional[str]:
    if point is None:
        return None
    return f"{_format_coordinate(point.lat)},{_format_coordinate(point.lng)}"

def parse_lat_lng(string: Optional[str]) -> Optional[GeoPoint]:
    if string is None:
        return None
    coordinates = _parse_coordinates(string)
    if coordinates is None or len(coordinates) != 2:
        return None
    return _point(coordinates[0], coordinates[1])

def build_geo_rects(rects: Optional[Sequence[GeoRect]]) -> Optional[str]:
    if rects is None:
        return None
    components = []
    for rect in rects:
        components.extend([
            _format_coordinate(rect.p1.lat),
            _format_coordinate(rect.p1.lng),
            _format_coordinate(rect.p2.lat),
            _format_coordinate(rect.p2.lng),
        ])
    return ",".join(components)

def parse_geo_rects(string: Optional[str]) -> Optional[List[GeoRect]]:
    """
    One rectangle per group of 4 numbers, in order. A single bad field
    invalidates the whole list rather than just its rectangle.
    """
    if string is None:
        return None
    if string == "":
        return []

    coordinates = _parse_coordinates(string)
    if coordinates is None or len(coordinates) % 4 != 0:
        return None

    rects = []
    for i in range(0, len(coordinates), 4):
        p1 = _point(coordinates[i], coordinates[i + 1])
        p2 = _point(coordinates[i + 2], coordinates[i + 3])
        if p1 is None or p2 is None:
            return None
        rects.append(GeoRect(p1=p1, p2=p2))
    return rects

def build_polygon(points: Optional[Sequence[GeoPoint]]) -> Optional[str]:
    """
    Only one polygon fits in a parameter: the service takes several polygons
    by repeating the name, which a name -> value mapping cannot express.
    """
    if points is None:
        return None
    if len(points) < MIN_POLYGON_POINTS:
        raise InvalidParameterError(
            f"A polygon needs at least {MIN_POLYGON_POINTS} points",
            details={"points": len(points)}
        )
    components = []
    for point in points:
        components.append(_format_coordinate(point.lat))
        components.append(_format_coordinate(point.lng))
    return ",".join(components)

def parse_polygon(string: Optional[str]) -> Optional[List[GeoPoint]]:
    if string is None:
        return None

    coordinates = _parse_coordinates(string)
    if coordinates is None or len(coordinates) % 2 != 0:
        return None
    if len(coordinates) // 2 < MIN_POLYGON_POINTS:
        return None

    points = []
    for i in range(0, len(coordinates), 2):
        point = _point(coordinates[i], coordinates[i + 1])
        if point is None:
            return None
        points.append(point)
    return points

# --- tagged unions ---

def build_remove_stop_words(value: Optional[RemoveStopWords]) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, AllStopWords):
        return build_bool(value.enabled)
    if isinstance(value, SelectedStopWords):
        return build_string_array(value.languages)
    raise InvalidParameterError(
        "Expected AllStopWords or SelectedStopWords", details={"value": repr(value)}
    )

def parse_remove_stop_words(string: Optional[str]) -> Optional[RemoveStopWords]:
    # "1" is both a boolean and a one-element list; the boolean reading wins
    enabled = parse_bool(string)
    if enabled is not None:
        return AllStopWords(enabled=enabled)

    languages = parse_string_array(string)
    if languages is not None:
        return SelectedStopWords(languages=languages)
    return None

def build_around_radius(value: Optional[AroundRadius]) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, AllRadius):
        return AROUND_RADIUS_ALL_VALUE
    if isinstance(value, ExplicitRadius):
        return build_uint(value.meters)
    raise InvalidParameterError(
        "Expected ExplicitRadius or AllRadius", details={"value": repr(value)}
    )

def parse_around_radius(string: Optional[str]) -> Optional[AroundRadius]:
    if string is None:
        return None
    if string == AROUND_RADIUS_ALL_VALUE:
        return AROUND_RADIUS_ALL

    meters = parse_uint(string)
    if meters is None:
        return None
    return ExplicitRadius(meters=meters)

# --- codec table ---

def _identity(value):
    return value

def _build_string(value: Optional[str]) -> Optional[str]:
    if value is not None and not isinstance(value, str):
        raise InvalidParameterError("Expected a string", details={"value": repr(value)})
    return value

def enum_codec(enum_cls: Type[E]) -> Codec:
    return Codec(
        encode=lambda value: build_enum(enum_cls, value),
        decode=lambda string: parse_enum(enum_cls, string),
    )

def enum_list_codec(enum_cls: Type[E]) -> Codec:
    return Codec(
        encode=lambda values: build_enum_list(enum_cls, values),
        decode=lambda string: parse_enum_list(enum_cls, string),
    )

STRING = Codec(_build_string, _identity)
UINT = Codec(build_uint, parse_uint)
BOOL = Codec(build_bool, parse_bool)
STRING_ARRAY = Codec(build_json_string_array, parse_string_array)
JSON_ARRAY = Codec(build_json_array, parse_json_array)
LAT_LNG = Codec(build_lat_lng, parse_lat_lng)
GEO_RECTS = Codec(build_geo_rects, parse_geo_rects)
POLYGON = Codec(build_polygon, parse_polygon)
REMOVE_STOP_WORDS = Codec(build_remove_stop_words, parse_remove_stop_words)
AROUND_RADIUS = Codec(build_around_radius, parse_around_radius)
