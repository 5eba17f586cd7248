"""Search-filter construction for lesson queries.

A search term is matched against several lesson fields and a record matches
when ANY field clause matches. Each field declares how it is compared:

- ``TEXT``: case-insensitive substring of a string field
- ``NUMERIC_TEXT``: case-insensitive substring of a number's text form
- ``EXACT_INT``: equality with the term parsed as an integer

A term that does not parse as the type a clause needs turns that clause into
a no-match instead of raising.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple

from afterschool.validation import INT64_MAX, INT64_MIN

# Never equal to a valid (non-negative) spaces value.
NO_MATCH_INT = -1
_LEADING_INT = re.compile(r"\s*([+-]?[0-9]+)")


class MatchMode(Enum):
    TEXT = "text"
    NUMERIC_TEXT = "numeric_text"
    EXACT_INT = "exact_int"


@dataclass(frozen=True)
class FieldMatch:
    field: str
    mode: MatchMode


LESSON_SEARCH_FIELDS: Tuple[FieldMatch, ...] = (
    FieldMatch("subject", MatchMode.TEXT),
    FieldMatch("location", MatchMode.TEXT),
    FieldMatch("price", MatchMode.NUMERIC_TEXT),
    FieldMatch("spaces", MatchMode.EXACT_INT),
)


def parse_int_term(term: str) -> int:
    """Parse the leading integer of a search term, or return NO_MATCH_INT.

    Trailing text is ignored, so "5abc" and "5.0" both parse as 5.
    """
    match = _LEADING_INT.match(term)
    if match is None:
        return NO_MATCH_INT
    value = int(match.group(1))
    if not INT64_MIN <= value <= INT64_MAX:
        return NO_MATCH_INT
    return value


def number_text(value: Any) -> Optional[str]:
    """Render a stored number the way the document store stringifies it."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (int, float)):
        return str(value)
    return None


@dataclass(frozen=True)
class SearchFilter:
    """Disjunctive filter of ``term`` across ``fields``."""

    term: str
    fields: Tuple[FieldMatch, ...] = LESSON_SEARCH_FIELDS

    def matches(self, doc: Mapping[str, Any]) -> bool:
        return any(self._clause_matches(f, doc.get(f.field)) for f in self.fields)

    def _clause_matches(self, fm: FieldMatch, value: Any) -> bool:
        needle = self.term.lower()
        if fm.mode is MatchMode.TEXT:
            return isinstance(value, str) and needle in value.lower()
        if fm.mode is MatchMode.NUMERIC_TEXT:
            text = number_text(value)
            return text is not None and needle in text.lower()
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return False
        # Numeric equality, so a stored 5.0 matches 5 as it does in MongoDB.
        return value == parse_int_term(self.term)

    def to_mongo(self) -> Dict[str, Any]:
        """Translate into a MongoDB query document."""
        pattern = re.escape(self.term)
        clauses: List[Dict[str, Any]] = []
        for fm in self.fields:
            if fm.mode is MatchMode.TEXT:
                clauses.append({fm.field: {"$regex": pattern, "$options": "i"}})
            elif fm.mode is MatchMode.NUMERIC_TEXT:
                # Numbers are not coerced by $regex; stringify explicitly.
                clauses.append({
                    "$expr": {
                        "$regexMatch": {
                            "input": {"$toString": f"${fm.field}"},
                            "regex": pattern,
                            "options": "i",
                        }
                    }
                })
            else:
                clauses.append({fm.field: parse_int_term(self.term)})
        return {"$or": clauses}


def build_search_filter(q: Optional[str]) -> Optional[SearchFilter]:
    """Return the lesson filter for ``q``, or None when ``q`` is empty."""
    if not q:
        return None
    return SearchFilter(term=q)
