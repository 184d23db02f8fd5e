"""
Attribute Extractor — turns a shopping query into an AttributeFilter.

Two tiers:
1. Fast path: keyword tables (no network call). A product type must match.
2. LLM fallback: strict JSON-only extraction when no type matched.

Any failure in the fallback degrades to need_qualification; nothing here raises.
"""

import re
from typing import List, Optional, Any
from models import AttributeFilter, ChatMessage, PriceRange, SearchIntent
from text_utils import normalize, contains_keyword, find_first_keyword, safe_json_loads
from chat_logger import get_logger, sanitize_log_string
from llm_client import _sanitize_for_llm
from keyword_tables import (
    PRODUCT_TYPE_MAP, STYLE_MAP, COLOR_MAP, MATERIAL_MAP, ROOM_MAP, SHAPE_MAP,
    PROMO_KEYWORDS, STOCK_KEYWORDS, SECTOR_KEYWORDS, DEFAULT_SECTOR,
    PRONOUN_TOKENS, PRONOUN_PREFIXES,
)

logger = get_logger("omnia_chat")

PRONOUN_HISTORY_TURNS = 3
LLM_HISTORY_TURNS = 2
EXTRACTION_MAX_TOKENS = 200

_NUMBER = r"(\d+(?:[.,]\d+)?)"
_PRICE_BETWEEN_RE = re.compile(r"entre\s+" + _NUMBER + r"\s*(?:€|euros?)?\s+et\s+" + _NUMBER)
# "sous" / "max" also introduce delays and sizes ("sous 48h"): amount needs a currency
_PRICE_MAX_RE = re.compile(
    r"\b(?:moins de|jusqu'a|pas plus de|budget(?: de)?)\s*:?\s*" + _NUMBER
    + r"|\b(?:sous|max(?:imum)?)\s*:?\s*" + _NUMBER + r"\s*(?:€|euros?)"
)
_PRICE_MIN_RE = re.compile(r"\b(?:plus de|a partir de|minimum|au moins)\s*" + _NUMBER + r"\s*(?:€|euros?)")
_PRICE_BARE_RE = re.compile(_NUMBER + r"\s*(?:€|euros?)")
_SIZE_DIMENSIONS_RE = re.compile(r"\b(\d{2,3})\s*x\s*(\d{2,3})\b")
_SIZE_SEATS_RE = re.compile(r"\b(\d)\s*places?\b")

EXTRACTION_PROMPT = """Tu es un extracteur d'attributs pour une boutique de mobilier.
Analyse la demande du client et réponds UNIQUEMENT avec un objet JSON, sans texte autour :
{
  "intent": "product_search" ou "need_qualification",
  "type": "type de produit ou null",
  "style": "style ou null",
  "color": "couleur ou null",
  "material": "matériau ou null",
  "room": "pièce ou null",
  "price_range": {"min": nombre ou null, "max": nombre ou null},
  "size": "dimensions ou null"
}
Utilise "product_search" seulement si un type de produit est identifiable,
sinon "need_qualification"."""


# ═══════════════════════════════════════════
# PRONOUN RESOLUTION
# ═══════════════════════════════════════════

def has_pronoun(message: str) -> bool:
    """True if the message refers back to something ("tu as ça en bleu ?")."""
    for raw in normalize(message).split():
        token = raw.strip(".,;:!?\"()")
        if token in PRONOUN_TOKENS or token.startswith(PRONOUN_PREFIXES):
            return True
    return False


def _user_turns(history: Optional[List[ChatMessage]], count: int) -> List[str]:
    turns = [m.content for m in (history or []) if m.role == "user" and m.content]
    return turns[-count:]


def resolve_context(message: str, history: Optional[List[ChatMessage]] = None) -> str:
    """Prepend recent user turns when the message uses an anaphoric pronoun."""
    if not history or not has_pronoun(message):
        return message
    previous = _user_turns(history, PRONOUN_HISTORY_TURNS)
    if not previous:
        return message
    return " ".join(previous + [message])


# ═══════════════════════════════════════════
# FAST PATH
# ═══════════════════════════════════════════

def _to_number(raw: str) -> float:
    return float(raw.replace(",", "."))


def extract_price_range(text: str) -> Optional[PriceRange]:
    """Price bounds from normalized text ("entre 200 et 400", "moins de 500")."""
    match = _PRICE_BETWEEN_RE.search(text)
    if match:
        low, high = sorted((_to_number(match.group(1)), _to_number(match.group(2))))
        return PriceRange(min=low, max=high)

    price_range = PriceRange()
    match = _PRICE_MAX_RE.search(text)
    if match:
        price_range.max = _to_number(match.group(1) or match.group(2))
    match = _PRICE_MIN_RE.search(text)
    if match:
        price_range.min = _to_number(match.group(1))
    if price_range.is_empty():
        # A bare amount ("un canapé à 800€") reads as a budget ceiling
        match = _PRICE_BARE_RE.search(text)
        if match:
            price_range.max = _to_number(match.group(1))
    return None if price_range.is_empty() else price_range


def extract_size(text: str) -> Optional[str]:
    match = _SIZE_DIMENSIONS_RE.search(text)
    if match:
        return f"{match.group(1)}x{match.group(2)}"
    match = _SIZE_SEATS_RE.search(text)
    if match:
        return f"{match.group(1)} places"
    return None


def _first_of(keyword_map, *texts) -> Optional[str]:
    for text in texts:
        found = find_first_keyword(text, keyword_map)
        if found:
            return found
    return None


def _any_keyword(text: str, keywords: List[str]) -> bool:
    return any(contains_keyword(text, k) for k in keywords)


def extract_fast(message: str, context: Optional[str] = None) -> Optional[AttributeFilter]:
    """
    Keyword-table extraction. Returns None when no product type is found.

    `context` is the message with resolved history prepended. The current
    message wins for every attribute; the context only fills the gaps.
    """
    current = normalize(message)
    texts = [current]
    if context and context != message:
        texts.append(normalize(context))

    product_type = _first_of(PRODUCT_TYPE_MAP, *texts)
    if not product_type:
        return None

    combined = " ".join(texts)
    return AttributeFilter(
        intent=SearchIntent.PRODUCT_SEARCH,
        type=product_type,
        style=_first_of(STYLE_MAP, *texts),
        color=_first_of(COLOR_MAP, *texts),
        material=_first_of(MATERIAL_MAP, *texts),
        room=_first_of(ROOM_MAP, *texts),
        shape=_first_of(SHAPE_MAP, *texts),
        size=extract_size(current),
        price_range=extract_price_range(current),
        on_sale=_any_keyword(combined, PROMO_KEYWORDS),
        in_stock=_any_keyword(current, STOCK_KEYWORDS),
    )


# ═══════════════════════════════════════════
# LLM FALLBACK
# ═══════════════════════════════════════════

def _clean_str(value: Any) -> Optional[str]:
    if not isinstance(value, str):
        return None
    value = value.strip()
    if not value or value.lower() in ("null", "none"):
        return None
    return value


def _parse_price_range(value: Any) -> Optional[PriceRange]:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return PriceRange(max=float(value))
    if not isinstance(value, dict):
        return None
    bounds = {}
    for key in ("min", "max"):
        raw = value.get(key)
        if isinstance(raw, (int, float)) and not isinstance(raw, bool):
            bounds[key] = float(raw)
        elif isinstance(raw, str):
            try:
                bounds[key] = _to_number(raw.strip())
            except ValueError:
                pass
    price_range = PriceRange(**bounds)
    return None if price_range.is_empty() else price_range


def parse_llm_filters(reply: str) -> AttributeFilter:
    """Turn a JSON-only model reply into a filter; anything unusable → need_qualification."""
    data = safe_json_loads(reply)
    if not data:
        return AttributeFilter()

    try:
        intent = SearchIntent(data.get("intent"))
    except ValueError:
        return AttributeFilter()

    filters = AttributeFilter(
        intent=intent,
        type=_clean_str(data.get("type")),
        style=_clean_str(data.get("style")),
        color=_clean_str(data.get("color")),
        material=_clean_str(data.get("material")),
        room=_clean_str(data.get("room")),
        size=_clean_str(data.get("size")),
        price_range=_parse_price_range(data.get("price_range")),
    )

    # A search needs its anchor
    if filters.is_search and not filters.type:
        filters.intent = SearchIntent.NEED_QUALIFICATION
    return filters


def extract_with_llm(message: str, history: Optional[List[ChatMessage]], llm) -> AttributeFilter:
    """JSON-only extraction through the completion service. Never raises."""
    if llm is None:
        return AttributeFilter()

    messages = [{"role": "system", "content": EXTRACTION_PROMPT}]
    for turn in (history or [])[-LLM_HISTORY_TURNS:]:
        messages.append({"role": turn.role, "content": _sanitize_for_llm(turn.content)})
    messages.append({"role": "user", "content": _sanitize_for_llm(message)})

    try:
        reply = llm.complete(messages, max_tokens=EXTRACTION_MAX_TOKENS)
        filters = parse_llm_filters(reply)
    except Exception as e:
        logger.warning(f"Step 2: LLM extraction failed | error={type(e).__name__}: {str(e)}")
        return AttributeFilter()

    logger.info(f"Step 2: LLM extraction | filters={filters.to_dict()}")
    return filters


# ═══════════════════════════════════════════
# PUBLIC API
# ═══════════════════════════════════════════

def extract_attributes(
    message: str,
    history: Optional[List[ChatMessage]] = None,
    llm=None,
) -> AttributeFilter:
    """Structured search filters for a message, using history for pronouns."""
    context = resolve_context(message, history)
    if context != message:
        logger.info(f"Step 2: pronoun resolved against history | context='{sanitize_log_string(context[:120])}'")

    filters = extract_fast(message, context)
    if filters:
        logger.info(f"Step 2: fast-path extraction | filters={filters.to_dict()}")
        return filters

    return extract_with_llm(context, history, llm)


def detect_sector(text: str) -> str:
    """Store sector a message belongs to: montres, pret_a_porter or meubles."""
    normalized = normalize(text)
    for sector, keywords in SECTOR_KEYWORDS.items():
        if _any_keyword(normalized, keywords):
            return sector
    return DEFAULT_SECTOR
