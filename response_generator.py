"""
Response generation: product replies, no-result replies, qualification
questions and small talk.

LLM replies are always optional. Every public function here falls back to a
template and never raises.
"""

import json
from typing import List, Optional

from models import AttributeFilter, ChatMessage, Product
from assistant_config import AssistantConfig
from services.product_formatter import product_facts
from text_utils import normalize, contains_keyword
from llm_client import _sanitize_for_llm
from chat_logger import get_logger

logger = get_logger("omnia_chat")

TECHNICAL_ERROR_MESSAGE = (
    "Je suis désolé, je rencontre un problème technique. "
    "Pouvez-vous réessayer dans un instant ?"
)

CONVERSATION_FALLBACK = (
    "Je suis là pour vous aider à trouver le mobilier idéal. Dites-moi ce que "
    "vous recherchez (type de meuble, style, budget) et je vous propose une sélection !"
)

# Greetings answered without calling the LLM
GREETING_SHORTCUTS = ["bonjour", "salut", "hello", "coucou", "hey", "bonsoir"]
GREETING_MAX_LENGTH = 25

CONVERSATION_HISTORY_TURNS = 4
MAX_PRODUCTS_IN_PROMPT = 6


# ═══════════════════════════════════════════
# FILTER DESCRIPTION
# ═══════════════════════════════════════════

def describe_filters(filters: Optional[AttributeFilter]) -> str:
    """Readable summary of what was searched: "canapé scandinave pour salon"."""
    if not filters:
        return ""
    parts = [p for p in (filters.type, filters.style, filters.color, filters.material) if p]
    text = " ".join(parts)
    if filters.room:
        text = f"{text} pour {filters.room}" if text else f"pour {filters.room}"
    if filters.price_range and filters.price_range.max is not None:
        text += f" à moins de {filters.price_range.max:g}€"
    return text.strip()


# ═══════════════════════════════════════════
# NO RESULTS / QUALIFICATION
# ═══════════════════════════════════════════

def _clarifying_questions(filters: Optional[AttributeFilter]) -> List[str]:
    f = filters or AttributeFilter()
    questions = []
    if not f.style:
        questions.append("Quel style vous plaît (scandinave, moderne, industriel, vintage...) ?")
    if not f.room:
        questions.append("Pour quelle pièce est-ce destiné ?")
    if not (f.color and f.material):
        questions.append("Avez-vous une couleur ou une matière préférée ?")
    if not f.price_range:
        questions.append("Quel budget souhaitez-vous consacrer ?")
    if not questions:
        questions.append("Souhaitez-vous que j'élargisse la recherche à des modèles proches ?")
    return questions[:4]


def compose_no_results(filters: Optional[AttributeFilter]) -> str:
    """Apology plus clarifying questions. Never a bare "no results"."""
    described = describe_filters(filters)
    if described:
        intro = f"Je n'ai pas trouvé de produits correspondant à « {described} » pour le moment."
    else:
        intro = "Je n'ai pas trouvé de produits correspondant à votre recherche pour le moment."
    questions = "\n".join(f"• {q}" for q in _clarifying_questions(filters))
    return f"{intro}\n\nPour vous aider à trouver la perle rare, pouvez-vous me préciser :\n{questions}"


def compose_qualification(filters: Optional[AttributeFilter]) -> str:
    """Scripted question when the request has no product type yet."""
    known = describe_filters(filters)
    if known:
        return (
            f"Avec plaisir ! Quel type de meuble recherchez-vous ({known}) : "
            "canapé, table, chaise, rangement... ?"
        )
    return (
        "Avec plaisir ! Pour vous proposer les bons produits, quel type de meuble "
        "recherchez-vous (canapé, table, chaise, lit...) ? N'hésitez pas à préciser "
        "le style, la couleur ou votre budget."
    )


# ═══════════════════════════════════════════
# PRODUCT REPLIES
# ═══════════════════════════════════════════

def _count_template(count: int) -> str:
    if count == 1:
        return "1 produit trouvé, voulez-vous plus de détails ?"
    return f"{count} produits trouvés, voulez-vous plus de détails ?"


def _product_system_prompt(config: AssistantConfig) -> str:
    return (
        f"Tu es {config.assistant_name}, conseiller expert en mobilier et décoration. "
        f"{config.instructions}\n"
        "Règles :\n"
        "- Utilise UNIQUEMENT les faits produits fournis, n'invente rien.\n"
        "- Mentionne les promotions (prix barré, pourcentage) quand elles existent.\n"
        "- Mentionne les dimensions quand elles sont fournies.\n"
        "- Termine par une question ouverte pour aider le client à choisir."
    )


def compose(
    products: List[Product],
    raw_query: str,
    filters: Optional[AttributeFilter] = None,
    llm=None,
    config: Optional[AssistantConfig] = None,
) -> str:
    """Natural-language reply for a search result. Never raises."""
    if not products:
        return compose_no_results(filters)

    template = _count_template(len(products))
    if llm is None:
        return template

    config = config or AssistantConfig()
    try:
        facts = [product_facts(p) for p in products[:MAX_PRODUCTS_IN_PROMPT]]
        user_prompt = (
            f"Demande du client : {_sanitize_for_llm(raw_query)}\n"
            f"Critères compris : {describe_filters(filters) or 'aucun'}\n"
            f"Produits disponibles ({len(products)}) :\n"
            f"{json.dumps(facts, ensure_ascii=False, indent=1)}"
        )
        reply = llm.complete(
            [
                {"role": "system", "content": _product_system_prompt(config)},
                {"role": "user", "content": user_prompt},
            ],
            max_tokens=config.max_tokens,
        )
    except Exception as e:
        logger.warning(f"Step 5: LLM compose failed, using template | error={type(e).__name__}: {str(e)}")
        return template

    if not reply or not reply.strip():
        return template
    return reply.strip()


# ═══════════════════════════════════════════
# SMALL TALK
# ═══════════════════════════════════════════

def is_simple_greeting(message: str) -> bool:
    text = normalize(message)
    if len(text) > GREETING_MAX_LENGTH:
        return False
    return any(contains_keyword(text, g) for g in GREETING_SHORTCUTS)


def greeting_reply(config: AssistantConfig) -> str:
    return (
        f"Bonjour ! Je suis {config.assistant_name}, votre conseiller déco. "
        "Que recherchez-vous aujourd'hui : canapé, table, rangement, luminaire... ?"
    )


def compose_conversation(
    message: str,
    history: Optional[List[ChatMessage]] = None,
    llm=None,
    config: Optional[AssistantConfig] = None,
) -> str:
    """Reply to small talk or a general question. Never raises."""
    config = config or AssistantConfig()
    if is_simple_greeting(message):
        return greeting_reply(config)
    if llm is None:
        return CONVERSATION_FALLBACK

    messages = [{
        "role": "system",
        "content": (
            f"Tu es {config.assistant_name}, conseiller en mobilier et décoration pour une boutique en ligne. "
            f"{config.instructions} Ne cite aucun produit précis ni aucun prix : "
            "si le client cherche un produit, invite-le à préciser le type de meuble souhaité."
        ),
    }]
    for turn in (history or [])[-CONVERSATION_HISTORY_TURNS:]:
        messages.append({"role": turn.role, "content": _sanitize_for_llm(turn.content)})
    messages.append({"role": "user", "content": _sanitize_for_llm(message)})

    try:
        reply = llm.complete(messages, max_tokens=config.max_tokens)
    except Exception as e:
        logger.warning(f"Step 5: LLM conversation failed, using template | error={type(e).__name__}: {str(e)}")
        return CONVERSATION_FALLBACK
    return reply.strip() if reply and reply.strip() else CONVERSATION_FALLBACK
