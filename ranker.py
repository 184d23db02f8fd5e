"""
Relevance Ranker — weighted-field scoring of search candidates.

Matching the explicit product type is worth hundreds to a thousand points,
incidental fields tens, so a search for "table" never surfaces a lamp whose
description merely mentions a table.
"""

from typing import List, Optional
from models import Product, ScoredProduct
from text_utils import normalize, split_terms
from keyword_tables import CANONICAL_TYPE_NOUNS
from app_config import TOP_N


# ─── Tunable magnitudes (keep the relative order) ───
RELEVANCE_WEIGHTS = {
    "type_exact":         1000,
    "type_partial":        800,
    "type_missing":       -500,
    "category_exact":      500,
    "category_partial":    100,
    "sub_category_partial": 80,
    "title_word_exact":    200,
    "title_term":           50,
    "tags_term":            30,
    "ai_attribute":         20,
    "description_term":     10,
}


def _singular(term: str) -> str:
    if len(term) > 3 and term[-1] in "sx":
        return term[:-1]
    return term


def query_terms(raw_query: str) -> List[str]:
    """Normalized, de-duplicated terms longer than 2 chars."""
    terms = []
    for term in split_terms(normalize(raw_query), min_length=3):
        if term not in terms:
            terms.append(term)
    return terms


def type_noun(terms: List[str]) -> Optional[str]:
    """First query term naming a canonical product type ("tables" → "table")."""
    for term in terms:
        for form in (term, _singular(term)):
            if form in CANONICAL_TYPE_NOUNS:
                return form
    return None


def _forms(term: str) -> set:
    return {term, _singular(term)}


def score_product(product: Product, terms: List[str], noun: Optional[str] = None) -> int:
    """Relevance of one product for already-normalized query terms."""
    w = RELEVANCE_WEIGHTS
    title = normalize(product.title)
    category = normalize(product.category)
    sub_category = normalize(product.sub_category)
    tags = normalize(product.tags)
    description = normalize(product.description or "")
    title_words = split_terms(title, min_length=1)
    score = 0

    # ─── Product type anchor ───
    if noun:
        noun_forms = {noun, noun + "s", noun + "x"}
        if title in noun_forms or category in noun_forms or sub_category in noun_forms:
            score += w["type_exact"]
        elif any(noun in field for field in (category, sub_category, title)):
            score += w["type_partial"]
        else:
            elsewhere = (tags, description, normalize(product.product_type))
            if not any(noun in field for field in elsewhere):
                score += w["type_missing"]

    # ─── Category / sub-category ───
    if category:
        if any(f in category for t in terms for f in _forms(t)):
            score += w["category_partial"]
        if any(category in _forms(t) or _singular(category) in _forms(t) for t in terms):
            score += w["category_exact"]
    if sub_category and any(f in sub_category for t in terms for f in _forms(t)):
        score += w["sub_category_partial"]

    # ─── Title ───
    for term in terms:
        if any(term in word or _singular(term) in word for word in title_words):
            score += w["title_term"]
    if any(_singular(word) in _forms(t) or word in _forms(t) for t in terms for word in title_words):
        score += w["title_word_exact"]

    # ─── Tags / AI attributes / description ───
    for term in terms:
        if tags and term in tags:
            score += w["tags_term"]
        if description and term in description:
            score += w["description_term"]

    ai_fields = (
        product.material_value, product.color_value, product.ai_shape,
        product.style, product.room,
    )
    for field in ai_fields:
        value = normalize(field or "")
        if value and any(f in value for t in terms for f in _forms(t)):
            score += w["ai_attribute"]

    return score


def rank_products(products: List[Product], raw_query: str, top_n: int = TOP_N) -> List[ScoredProduct]:
    """Top `top_n` products by descending score; ties keep retrieval order."""
    terms = query_terms(raw_query)
    noun = type_noun(terms)
    scored = [ScoredProduct(product=p, relevance_score=score_product(p, terms, noun)) for p in products]
    scored.sort(key=lambda s: s.relevance_score, reverse=True)
    return scored[:top_n]
