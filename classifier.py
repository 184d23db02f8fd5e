"""
Intent Classifier for the OmnIA shopping assistant.

Scores a message against weighted keyword buckets and picks one of
simple_chat / product_chat / product_show. Pure and deterministic.
"""

from typing import Dict, List, Optional
from models import Intent, ChatMessage
from text_utils import normalize, contains_keyword
from keyword_tables import (
    GREETING_KEYWORDS, SHOW_KEYWORDS, ADVICE_KEYWORDS, PRODUCT_TYPE_MAP,
)


# ─── Weighted buckets: (keywords, {intent: weight}) ───
INTENT_BUCKETS = [
    (GREETING_KEYWORDS,            {Intent.SIMPLE_CHAT: 10}),
    (SHOW_KEYWORDS,                {Intent.PRODUCT_SHOW: 20}),
    (ADVICE_KEYWORDS,              {Intent.PRODUCT_CHAT: 8}),
    (list(PRODUCT_TYPE_MAP.keys()), {Intent.PRODUCT_CHAT: 5, Intent.PRODUCT_SHOW: 5}),
]

SHORT_MESSAGE_LENGTH = 15
SHORT_MESSAGE_BOOST = 5

# Tie-break order, strongest first
INTENT_PRIORITY = [Intent.PRODUCT_SHOW, Intent.PRODUCT_CHAT, Intent.SIMPLE_CHAT]


def score_intents(message: str) -> Dict[Intent, int]:
    """Raw per-intent scores for a message (useful for debugging the tables)."""
    text = normalize(message)
    scores = {intent: 0 for intent in INTENT_PRIORITY}

    for keywords, weights in INTENT_BUCKETS:
        for keyword in keywords:
            if contains_keyword(text, keyword):
                for intent, weight in weights.items():
                    scores[intent] += weight

    # Short pure greetings ("Salut !") get a further push
    only_chat = scores[Intent.SIMPLE_CHAT] > 0 and not any(
        scores[i] for i in (Intent.PRODUCT_CHAT, Intent.PRODUCT_SHOW)
    )
    if len(text) < SHORT_MESSAGE_LENGTH and only_chat:
        scores[Intent.SIMPLE_CHAT] += SHORT_MESSAGE_BOOST

    return scores


def classify(message: str, history: Optional[List[ChatMessage]] = None) -> Intent:
    """Classify a user message. Messages with no known keyword are simple_chat."""
    scores = score_intents(message or "")
    best = max(scores.values())
    if best == 0:
        return Intent.SIMPLE_CHAT

    # First in priority order among the intents sharing the max score
    for intent in INTENT_PRIORITY:
        if scores[intent] == best:
            return intent
    return Intent.SIMPLE_CHAT
