"""
Text helpers shared by the classifier, extractor and ranker.
"""

import json
import re
import unicodedata
from functools import lru_cache
from typing import Any, Dict, List, Optional

_TERM_STRIP_RE = re.compile(r"^[^\w]+|[^\w]+$")


def normalize(text: str) -> str:
    """Lowercase, strip diacritics and trim.

    "Canapé  Scandinave " -> "canape  scandinave". Idempotent, and total over
    any string (empty in, empty out).
    """
    if not text:
        return ""
    decomposed = unicodedata.normalize("NFD", text.lower())
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return stripped.strip()


def split_terms(text: str, min_length: int = 3) -> List[str]:
    """Whitespace terms of at least `min_length` chars, edge punctuation removed."""
    terms = []
    for raw in (text or "").lower().split():
        term = _TERM_STRIP_RE.sub("", raw)
        if len(term) >= min_length:
            terms.append(term)
    return terms


@lru_cache(maxsize=1024)
def _keyword_pattern(keyword: str) -> "re.Pattern":
    # Each word may carry a plural s/x: "table basse" also matches "tables basses"
    words = normalize(keyword).split()
    body = r"\s+".join(re.escape(w) + r"(?:s|x)?" for w in words)
    return re.compile(r"(?<!\w)" + body + r"(?!\w)")


def contains_keyword(normalized_text: str, keyword: str) -> bool:
    """True if `keyword` occurs in already-normalized text as whole word(s)."""
    if not normalized_text or not keyword:
        return False
    return _keyword_pattern(keyword).search(normalized_text) is not None


def find_first_keyword(normalized_text: str, keyword_map: Dict[str, str]) -> Optional[str]:
    """Return the canonical value of the first keyword (in table order) found."""
    for keyword, canonical in keyword_map.items():
        if contains_keyword(normalized_text, keyword):
            return canonical
    return None


def extract_json_block(text: str) -> Optional[str]:
    """Return the first `{...}` block of a model reply, or None."""
    if not text:
        return None
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end == -1 or end <= start:
        return None
    return text[start : end + 1]


def safe_json_loads(text: str) -> Optional[Dict[str, Any]]:
    """Parse a JSON object out of a model reply; None when there is none."""
    block = extract_json_block(text)
    if not block:
        return None
    try:
        parsed = json.loads(block)
    except json.JSONDecodeError:
        return None
    return parsed if isinstance(parsed, dict) else None


def truncate(text: str, limit: int) -> str:
    if not text or len(text) <= limit:
        return text or ""
    return text[:limit].rsplit(" ", 1)[0].rstrip(" ,.;:") + "…"
