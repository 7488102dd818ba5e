import logging
import re
from typing import Dict, Mapping, Optional
from urllib.parse import quote, unquote

from models.parameters import (
    AlternativesAsExact,
    ExactOnSingleWordQuery,
    QueryType,
    RemoveWordsIfNoResults,
    TypoTolerance,
)
from search import codecs
from search.store import ParameterStore

logger = logging.getLogger(__name__)

_MALFORMED_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")

def encode_component(text: str) -> str:
    # everything outside A-Z a-z 0-9 - _ . ~ is escaped, space becomes %20
    return quote(text, safe="")

def decode_component(text: str) -> Optional[str]:
    """
    Percent-decode a name or value. Returns None for a stray '%' or for
    escapes that do not form valid UTF-8. '+' is left alone.
    """
    if _MALFORMED_ESCAPE.search(text):
        return None
    try:
        return unquote(text, errors="strict")
    except UnicodeDecodeError:
        return None

class TypedParameter:
    """
    A typed view over one raw parameter: reads decode the stored string,
    writes store the encoded value, and None (or del) removes it.
    """

    def __init__(self, name: str, codec: codecs.Codec, doc: Optional[str] = None):
        self.name = name
        self.codec = codec
        self.__doc__ = doc

    def __get__(self, query, owner=None):
        if query is None:
            return self
        return self.codec.decode(query.get(self.name))

    def __set__(self, query, value):
        query.set(self.name, self.codec.encode(value))

    def __delete__(self, query):
        query.set(self.name, None)

class Query:
    """
    All parameters of a search query.

    Parameters are stored as untyped strings and can be reached in two ways:
    the typed attributes below (recommended), or the untyped ``get``/``set``
    accessors and subscript operator for parameters the typed view does not
    cover. Every parameter is optional: when it is absent the service applies
    its own default.
    """

    TYPED_PARAMETERS: Dict[str, str] = {}

    def __init__(self, query: Optional[str] = None, parameters: Optional[Mapping[str, str]] = None):
        self._store = ParameterStore(parameters)
        if query is not None:
            self.query = query

    # --- untyped access ---

    def get(self, name: str) -> Optional[str]:
        return self._store.get(name)

    def set(self, name: str, value: Optional[str]) -> None:
        self._store.set(name, value)

    def __getitem__(self, name: str) -> Optional[str]:
        return self._store.get(name)

    def __setitem__(self, name: str, value: Optional[str]) -> None:
        self._store.set(name, value)

    def __delitem__(self, name: str) -> None:
        self._store.remove(name)

    def __contains__(self, name: object) -> bool:
        return name in self._store

    @property
    def parameters(self) -> Dict[str, str]:
        return self._store.to_dict()

    # --- full text search ---

    query = TypedParameter(
        "query", codecs.STRING,
        "The full text query. Every word is matched as a prefix; when absent, all objects are retrieved."
    )
    query_type = TypedParameter("queryType", codecs.enum_codec(QueryType))
    typo_tolerance = TypedParameter("typoTolerance", codecs.enum_codec(TypoTolerance))
    min_word_size_for_1_typo = TypedParameter(
        "minWordSizefor1Typo", codecs.UINT,
        "Minimum number of characters in a query word to accept one typo."
    )
    min_word_size_for_2_typos = TypedParameter(
        "minWordSizefor2Typos", codecs.UINT,
        "Minimum number of characters in a query word to accept two typos."
    )
    allow_typos_on_numeric_tokens = TypedParameter(
        "allowTyposOnNumericTokens", codecs.BOOL,
        "When false, numbers in the query only match exactly (useful for zip codes or serial numbers)."
    )
    ignore_plurals = TypedParameter("ignorePlurals", codecs.BOOL)
    restrict_searchable_attributes = TypedParameter(
        "restrictSearchableAttributes", codecs.STRING_ARRAY,
        "Subset of the searchable attributes to use for this query."
    )
    advanced_syntax = TypedParameter("advancedSyntax", codecs.BOOL)
    analytics = TypedParameter("analytics", codecs.BOOL)
    analytics_tags = TypedParameter("analyticsTags", codecs.STRING_ARRAY)
    synonyms = TypedParameter("synonyms", codecs.BOOL)
    replace_synonyms_in_highlight = TypedParameter("replaceSynonymsInHighlight", codecs.BOOL)
    optional_words = TypedParameter(
        "optionalWords", codecs.STRING_ARRAY,
        "Words treated as optional, in addition to the ones from the index settings."
    )
    min_proximity = TypedParameter(
        "minProximity", codecs.UINT,
        "Proximity distance considered as best; 2 lets one word sit between two matching words at no cost."
    )
    remove_words_if_no_results = TypedParameter(
        "removeWordsIfNoResults", codecs.enum_codec(RemoveWordsIfNoResults)
    )
    disable_typo_tolerance_on_attributes = TypedParameter(
        "disableTypoToleranceOnAttributes", codecs.STRING_ARRAY
    )
    remove_stop_words = TypedParameter(
        "removeStopWords", codecs.REMOVE_STOP_WORDS,
        "AllStopWords(enabled) for every supported language, or SelectedStopWords(languages)."
    )
    exact_on_single_word_query = TypedParameter(
        "exactOnSingleWordQuery", codecs.enum_codec(ExactOnSingleWordQuery)
    )
    alternatives_as_exact = TypedParameter(
        "alternativesAsExact", codecs.enum_list_codec(AlternativesAsExact),
        "Alternatives counted as exact matches. Unknown values read from the raw string are dropped."
    )

    # --- pagination ---

    page = TypedParameter("page", codecs.UINT, "Page to retrieve (zero-based).")
    hits_per_page = TypedParameter("hitsPerPage", codecs.UINT)

    # --- result content ---

    attributes_to_retrieve = TypedParameter("attributesToRetrieve", codecs.STRING_ARRAY)
    attributes_to_highlight = TypedParameter("attributesToHighlight", codecs.STRING_ARRAY)
    attributes_to_snippet = TypedParameter(
        "attributesToSnippet", codecs.STRING_ARRAY,
        'Attributes to snippet, optionally with a word count ("content:80").'
    )
    get_ranking_info = TypedParameter("getRankingInfo", codecs.BOOL)
    highlight_pre_tag = TypedParameter("highlightPreTag", codecs.STRING)
    highlight_post_tag = TypedParameter("highlightPostTag", codecs.STRING)
    snippet_ellipsis_text = TypedParameter("snippetEllipsisText", codecs.STRING)

    # --- filtering ---

    numeric_filters = TypedParameter("numericFilters", codecs.JSON_ARRAY)
    tag_filters = TypedParameter(
        "tagFilters", codecs.JSON_ARRAY,
        'Tag filters; nested lists are ORed, e.g. ["tag1", ["tag2", "tag3"]].'
    )
    distinct = TypedParameter("distinct", codecs.UINT)
    facets = TypedParameter("facets", codecs.STRING_ARRAY)
    facet_filters = TypedParameter("facetFilters", codecs.JSON_ARRAY)
    max_values_per_facet = TypedParameter("maxValuesPerFacet", codecs.UINT)
    filters = TypedParameter(
        "filters", codecs.STRING,
        'SQL-like filter expression, e.g. "available=1 AND (category:Book OR NOT category:Ebook)".'
    )

    # --- geo search ---

    around_lat_lng = TypedParameter("aroundLatLng", codecs.LAT_LNG)
    around_lat_lng_via_ip = TypedParameter("aroundLatLngViaIP", codecs.BOOL)
    around_radius = TypedParameter(
        "aroundRadius", codecs.AROUND_RADIUS,
        'ExplicitRadius(meters) or AllRadius() (stored as "all") to disable radius filtering.'
    )
    around_precision = TypedParameter("aroundPrecision", codecs.UINT)
    minimum_around_radius = TypedParameter("minimumAroundRadius", codecs.UINT)
    inside_bounding_box = TypedParameter(
        "insideBoundingBox", codecs.GEO_RECTS,
        "Rectangles to search in; a hit inside any of them matches."
    )
    inside_polygon = TypedParameter(
        "insidePolygon", codecs.POLYGON,
        "A single polygon of at least 3 points."
    )

    # --- serialization ---

    def build(self) -> str:
        """
        Canonical query string: parameters sorted by name, names and values
        percent-encoded. Equal parameter sets always build the same string.
        """
        components = []
        for name, value in self._store.sorted_items():
            components.append(encode_component(name) + "=" + encode_component(value))
        return "&".join(components)

    @classmethod
    def parse(cls, query_string: str) -> "Query":
        query = cls()
        query.parse_into(query_string)
        return query

    def parse_into(self, query_string: str) -> None:
        """
        Merge a query string into this query, scanning left to right.

        ``name=value`` sets the parameter (later occurrences win), a bare
        ``name`` removes it, and components that are empty, carry more than
        one '=' or have a broken escape in the name are skipped. A broken
        escape in the value removes the parameter, like a bare name.
        """
        for component in query_string.split("&"):
            if not component:
                continue

            fields = component.split("=")
            if len(fields) > 2:
                logger.debug("Skipping query component with extra '=': %r", component)
                continue

            name = decode_component(fields[0])
            if name is None:
                logger.debug("Skipping query component with bad escape in name: %r", component)
                continue

            if len(fields) == 1:
                self._store.remove(name)
                continue

            value = decode_component(fields[1])
            if value is None:
                # an undecodable value counts as no value at all
                logger.debug("Removing parameter with bad escape in value: %r", component)
                self._store.remove(name)
                continue
            self._store.set(name, value)

    # --- value semantics ---

    def copy(self) -> "Query":
        duplicate = type(self)()
        duplicate._store = self._store.copy()
        return duplicate

    def __copy__(self):
        return self.copy()

    def __deepcopy__(self, memo):
        return self.copy()

    def __eq__(self, other):
        if not isinstance(other, Query):
            return NotImplemented
        return self._store == other._store

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self):
        return f"Query({self._store.to_dict()!r})"

Query.TYPED_PARAMETERS = {
    attr: descriptor.name
    for attr, descriptor in vars(Query).items()
    if isinstance(descriptor, TypedParameter)
}
