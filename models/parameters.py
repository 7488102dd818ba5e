from enum import Enum
from typing import List, Union
from pydantic import BaseModel, ConfigDict, Field

# Largest value an unsigned parameter may take (64-bit unsigned).
UINT_MAX = 2**64 - 1

AROUND_RADIUS_ALL_VALUE = "all"

class QueryType(str, Enum):
    """How query words are interpreted as prefixes."""
    PREFIX_ALL = "prefixAll"
    PREFIX_LAST = "prefixLast"
    PREFIX_NONE = "prefixNone"

class TypoTolerance(str, Enum):
    ENABLED = "true"
    DISABLED = "false"
    # keep only the results with the lowest number of typos
    MIN = "min"
    # drop results with 2+ typos when a typo-free match exists
    STRICT = "strict"

class RemoveWordsIfNoResults(str, Enum):
    """Strategy used to relax a query that returned no results."""
    NONE = "none"
    LAST_WORDS = "lastWords"
    FIRST_WORDS = "firstWords"
    ALL_OPTIONAL = "allOptional"

class ExactOnSingleWordQuery(str, Enum):
    NONE = "none"
    WORD = "word"
    ATTRIBUTE = "attribute"

class AlternativesAsExact(str, Enum):
    IGNORE_PLURALS = "ignorePlurals"
    SINGLE_WORD_SYNONYM = "singleWordSynonym"
    MULTI_WORDS_SYNONYM = "multiWordsSynonym"

# --- removeStopWords ---

class AllStopWords(BaseModel):
    """Apply (or don't apply) stop word removal to every supported language."""
    model_config = ConfigDict(frozen=True)

    enabled: bool

class SelectedStopWords(BaseModel):
    """Apply stop word removal to an explicit list of ISO language codes."""
    model_config = ConfigDict(frozen=True)

    languages: List[str]

RemoveStopWords = Union[AllStopWords, SelectedStopWords]

# --- aroundRadius ---

class ExplicitRadius(BaseModel):
    """Search radius in meters."""
    model_config = ConfigDict(frozen=True)

    meters: int = Field(..., ge=0, le=UINT_MAX)

class AllRadius(BaseModel):
    """Disable radius filtering altogether."""
    model_config = ConfigDict(frozen=True)

AROUND_RADIUS_ALL = AllRadius()

AroundRadius = Union[ExplicitRadius, AllRadius]
