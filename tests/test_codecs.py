import pytest
from search import codecs
from search.exceptions import InvalidParameterError
from models.geo import GeoPoint, GeoRect
from models.parameters import (
    UINT_MAX,
    AROUND_RADIUS_ALL,
    AllRadius,
    AllStopWords,
    AlternativesAsExact,
    ExplicitRadius,
    QueryType,
    SelectedStopWords,
)


# -------------------------
# Unsigned integers
# -------------------------

def test_uint_bounds():
    assert codecs.parse_uint(codecs.build_uint(0)) == 0
    assert codecs.parse_uint(codecs.build_uint(UINT_MAX)) == UINT_MAX


def test_uint_rejects_bad_input():
    assert codecs.parse_uint(None) is None
    assert codecs.parse_uint("") is None
    assert codecs.parse_uint("-1") is None
    assert codecs.parse_uint("12a") is None
    assert codecs.parse_uint(" 12") is None
    assert codecs.parse_uint("1.5") is None
    assert codecs.parse_uint(str(UINT_MAX + 1)) is None


def test_uint_accepts_plus_sign_and_leading_zeros():
    assert codecs.parse_uint("+5") == 5
    assert codecs.parse_uint("007") == 7
    assert codecs.parse_uint("0" * 5000 + "1") == 1


def test_uint_huge_number_is_absent_not_error():
    assert codecs.parse_uint("9" * 5000) is None


def test_build_uint_preconditions():
    with pytest.raises(InvalidParameterError):
        codecs.build_uint(-1)
    with pytest.raises(InvalidParameterError):
        codecs.build_uint(UINT_MAX + 1)
    with pytest.raises(InvalidParameterError):
        codecs.build_uint(True)
    with pytest.raises(InvalidParameterError):
        codecs.build_uint("5")  # type: ignore[arg-type]


# -------------------------
# Booleans
# -------------------------

def test_bool_build():
    assert codecs.build_bool(True) == "true"
    assert codecs.build_bool(False) == "false"
    assert codecs.build_bool(None) is None


def test_bool_parse_words_any_case():
    assert codecs.parse_bool("true") is True
    assert codecs.parse_bool("TRUE") is True
    assert codecs.parse_bool("False") is False


def test_bool_parse_integers():
    assert codecs.parse_bool("1") is True
    assert codecs.parse_bool("0") is False
    assert codecs.parse_bool("-3") is True
    assert codecs.parse_bool("000") is False


def test_bool_parse_integer_range():
    assert codecs.parse_bool(str(2**63 - 1)) is True
    assert codecs.parse_bool(str(-(2**63))) is True
    assert codecs.parse_bool(str(2**63)) is None
    assert codecs.parse_bool("99999999999999999999") is None
    assert codecs.parse_bool("0" * 5000 + "1") is True


def test_bool_parse_rejects_other_strings():
    assert codecs.parse_bool("yes") is None
    assert codecs.parse_bool("") is None
    assert codecs.parse_bool("1.0") is None
    assert codecs.parse_bool(None) is None


# -------------------------
# Enums
# -------------------------

def test_enum_exact_match_only():
    assert codecs.parse_enum(QueryType, "prefixAll") is QueryType.PREFIX_ALL
    assert codecs.parse_enum(QueryType, "PrefixAll") is None
    assert codecs.parse_enum(QueryType, "unknown") is None


def test_enum_build_accepts_member_or_value():
    assert codecs.build_enum(QueryType, QueryType.PREFIX_NONE) == "prefixNone"
    assert codecs.build_enum(QueryType, "prefixLast") == "prefixLast"
    with pytest.raises(InvalidParameterError):
        codecs.build_enum(QueryType, "bogus")


def test_enum_list_drops_unknown_tags():
    values = codecs.parse_enum_list(AlternativesAsExact, "ignorePlurals,bogus,multiWordsSynonym")
    assert values == [AlternativesAsExact.IGNORE_PLURALS, AlternativesAsExact.MULTI_WORDS_SYNONYM]


def test_enum_list_is_comma_encoded():
    raw = codecs.build_enum_list(
        AlternativesAsExact,
        [AlternativesAsExact.IGNORE_PLURALS, AlternativesAsExact.SINGLE_WORD_SYNONYM],
    )
    assert raw == "ignorePlurals,singleWordSynonym"


# -------------------------
# String arrays
# -------------------------

def test_string_array_prefers_json():
    assert codecs.parse_string_array('["a","b"]') == ["a", "b"]
    assert codecs.parse_string_array('["a,b"]') == ["a,b"]


def test_string_array_falls_back_to_commas():
    assert codecs.parse_string_array("a,b") == ["a", "b"]
    assert codecs.parse_string_array("a") == ["a"]
    assert codecs.parse_string_array("a,,b") == ["a", "", "b"]


def test_string_array_mixed_json_falls_back_to_commas():
    assert codecs.parse_string_array('["a", 1]') == ['["a"', " 1]"]


def test_string_array_empty():
    assert codecs.parse_string_array("") == []
    assert codecs.parse_string_array("[]") == []
    assert codecs.build_string_array([]) == ""
    assert codecs.build_json_string_array([]) == "[]"


def test_json_string_array_encoding():
    assert codecs.build_json_string_array(["a", "b"]) == '["a","b"]'
    with pytest.raises(InvalidParameterError):
        codecs.build_json_string_array("ab")  # type: ignore[arg-type]
    with pytest.raises(InvalidParameterError):
        codecs.build_json_string_array(["a", 1])  # type: ignore[list-item]


# -------------------------
# Generic JSON arrays
# -------------------------

def test_json_array_round_trip():
    values = ["tag1", ["tag2", "tag3"], 4, None, True, {"k": 1.5}]
    assert codecs.parse_json_array(codecs.build_json_array(values)) == values


def test_json_array_is_compact():
    assert codecs.build_json_array(["a", ["b", "c"]]) == '["a",["b","c"]]'


def test_json_array_malformed_is_absent():
    assert codecs.parse_json_array("not json") is None
    assert codecs.parse_json_array('{"a": 1}') is None
    assert codecs.parse_json_array('"a"') is None
    assert codecs.parse_json_array("[1,") is None


def test_json_array_unserializable_raises():
    with pytest.raises(InvalidParameterError):
        codecs.build_json_array([object()])


def test_json_array_non_finite_numbers_raise():
    for bad in (float("nan"), float("inf"), float("-inf")):
        with pytest.raises(InvalidParameterError):
            codecs.build_json_array([bad, 1])
    with pytest.raises(InvalidParameterError):
        codecs.build_json_array([["price", {"max": float("inf")}]])


# -------------------------
# Geo
# -------------------------

def test_lat_lng():
    assert codecs.build_lat_lng(GeoPoint(lat=48.8566, lng=2.3522)) == "48.8566,2.3522"
    assert codecs.build_lat_lng(GeoPoint(lat=1, lng=-2)) == "1.0,-2.0"
    assert codecs.parse_lat_lng("1,2") == GeoPoint(lat=1.0, lng=2.0)
    assert codecs.parse_lat_lng("-1.5e1,.5") == GeoPoint(lat=-15.0, lng=0.5)


def test_lat_lng_requires_two_numeric_fields():
    assert codecs.parse_lat_lng("1") is None
    assert codecs.parse_lat_lng("1,2,3") is None
    assert codecs.parse_lat_lng("1,x") is None
    assert codecs.parse_lat_lng(" 1,2") is None
    assert codecs.parse_lat_lng("nan,1") is None
    assert codecs.parse_lat_lng("1e999,1") is None


def test_bounding_boxes_encoding():
    rects = [
        GeoRect(p1=GeoPoint(lat=1, lng=2), p2=GeoPoint(lat=3, lng=4)),
        GeoRect(p1=GeoPoint(lat=5, lng=6), p2=GeoPoint(lat=7, lng=8)),
    ]
    raw = codecs.build_geo_rects(rects)
    assert raw == "1.0,2.0,3.0,4.0,5.0,6.0,7.0,8.0"
    assert codecs.parse_geo_rects(raw) == rects


def test_bounding_boxes_need_multiple_of_four():
    assert codecs.parse_geo_rects("1,2,3") is None
    assert codecs.parse_geo_rects("1,2,3,4,5") is None


def test_bounding_boxes_all_or_nothing():
    # one bad field drops every rectangle, not only its own
    assert codecs.parse_geo_rects("1,2,3,4,5,6,x,8") is None


def test_bounding_boxes_empty_list():
    assert codecs.build_geo_rects([]) == ""
    assert codecs.parse_geo_rects("") == []


def test_polygon_round_trip():
    points = [GeoPoint(lat=0, lng=0), GeoPoint(lat=0, lng=1), GeoPoint(lat=1, lng=1)]
    raw = codecs.build_polygon(points)
    assert raw == "0.0,0.0,0.0,1.0,1.0,1.0"
    assert codecs.parse_polygon(raw) == points


def test_polygon_needs_three_points_to_build():
    with pytest.raises(InvalidParameterError):
        codecs.build_polygon([GeoPoint(lat=0, lng=0), GeoPoint(lat=1, lng=1)])


def test_polygon_decode_failures():
    assert codecs.parse_polygon("1,2,3,4") is None
    assert codecs.parse_polygon("1,2,3,4,5") is None
    assert codecs.parse_polygon("1,2,3,4,5,y") is None
    assert codecs.parse_polygon("") is None


# -------------------------
# Tagged unions
# -------------------------

def test_stop_words_all():
    raw = codecs.build_remove_stop_words(AllStopWords(enabled=True))
    assert raw == "true"
    assert codecs.parse_remove_stop_words(raw) == AllStopWords(enabled=True)
    assert codecs.parse_remove_stop_words("false") == AllStopWords(enabled=False)


def test_stop_words_selected():
    raw = codecs.build_remove_stop_words(SelectedStopWords(languages=["en", "fr"]))
    assert raw == "en,fr"
    assert codecs.parse_remove_stop_words(raw) == SelectedStopWords(languages=["en", "fr"])
    assert codecs.parse_remove_stop_words('["de"]') == SelectedStopWords(languages=["de"])


def test_stop_words_boolean_reading_wins():
    assert codecs.parse_remove_stop_words("1") == AllStopWords(enabled=True)
    assert codecs.parse_remove_stop_words("0") == AllStopWords(enabled=False)


def test_around_radius():
    assert codecs.build_around_radius(AROUND_RADIUS_ALL) == "all"
    assert codecs.build_around_radius(ExplicitRadius(meters=50)) == "50"
    assert codecs.parse_around_radius("all") == AllRadius()
    assert codecs.parse_around_radius("50") == ExplicitRadius(meters=50)


def test_around_radius_explicit_never_yields_sentinel():
    raw = codecs.build_around_radius(ExplicitRadius(meters=UINT_MAX))
    assert raw == str(UINT_MAX)
    assert codecs.parse_around_radius(raw) == ExplicitRadius(meters=UINT_MAX)


def test_around_radius_decode_failures():
    assert codecs.parse_around_radius("ALL") is None
    assert codecs.parse_around_radius("-5") is None
    assert codecs.parse_around_radius("") is None
