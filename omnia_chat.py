"""
OmnIA chat engine — one entry point for the widget and the HTTP endpoint.

Pipeline per turn:
  Step 1: classify intent
  Step 2: extract search attributes (product intents only)
  Step 3: search the catalog (scoped, unscoped retry)
  Step 4: rank candidates
  Step 5: compose the reply

The catalog and LLM clients are injected; either may be None, in which case
the engine answers from templates.
"""

import time
from typing import List, Optional, Union

from models import (
    AttributeFilter, ChatMessage, ChatMode, ChatResponse, Intent, Product,
)
from classifier import classify
from attribute_extractor import extract_attributes, detect_sector
from product_search import search_products
from ranker import rank_products
from response_generator import (
    compose, compose_conversation, compose_qualification, TECHNICAL_ERROR_MESSAGE,
)
from assistant_config import AssistantConfig, load_assistant_config
from conversation_flow import TurnState, TurnTrace
from services.suggestion_generator import generate_suggestions
from services.catalog_client import CatalogClient
from llm_client import LLMClient
from text_utils import normalize, contains_keyword
from chat_logger import get_logger, sanitize_log_string
from app_config import TOP_N, HISTORY_WINDOW, LLM_FALLBACK_ENABLED

logger = get_logger("omnia_chat")

HistoryLike = List[Union[ChatMessage, dict]]


def _coerce_history(history: Optional[HistoryLike], window: int) -> List[ChatMessage]:
    """ChatMessage list from dicts or messages, keeping the last `window` entries."""
    messages = []
    for item in history or []:
        if isinstance(item, ChatMessage):
            messages.append(item)
        elif isinstance(item, dict):
            messages.append(ChatMessage.from_dict(item))
    return messages[-window:] if window > 0 else []


class OmniaChat:
    """Conversational product search over an injected catalog and LLM."""

    def __init__(
        self,
        catalog=None,
        llm=None,
        config: Optional[AssistantConfig] = None,
        top_n: int = TOP_N,
        history_window: int = HISTORY_WINDOW,
    ):
        self.catalog = catalog
        self.llm = llm
        self.config = config or AssistantConfig()
        self.top_n = top_n
        self.history_window = history_window

    def chat(
        self,
        message: str,
        history: Optional[HistoryLike] = None,
        scope_id: Optional[str] = None,
        scope_field: str = "store_id",
    ) -> ChatResponse:
        """Answer one user turn. Never raises; worst case is a technical-issue message."""
        start_time = time.time()
        try:
            response = self._run_turn(message or "", _coerce_history(history, self.history_window),
                                      scope_id, scope_field)
        except Exception as e:
            logger.error(f"Turn failed | error={type(e).__name__}: {str(e)}", exc_info=True)
            response = ChatResponse(
                content=TECHNICAL_ERROR_MESSAGE,
                intent=Intent.SIMPLE_CHAT,
                mode=ChatMode.CONVERSATION,
                sector=detect_sector(message or ""),
            )
        logger.info(
            f"Turn complete | intent={response.intent.value} | mode={response.mode.value} | "
            f"products={len(response.products)} | time={int((time.time() - start_time) * 1000)}ms"
        )
        return response

    def _run_turn(
        self,
        message: str,
        history: List[ChatMessage],
        scope_id: Optional[str],
        scope_field: str,
    ) -> ChatResponse:
        trace = TurnTrace()
        logger.info(f'Step 0: message="{sanitize_log_string(message[:100])}" | history={len(history)} | scope={scope_id}')

        recent_user_text = " ".join(m.content for m in history if m.role == "user")
        sector = detect_sector(f"{recent_user_text} {message}")

        # ─── Step 1: intent ───
        intent = classify(message, history)
        trace.advance(TurnState.CLASSIFIED)
        logger.info(f"Step 1: intent={intent.value} | sector={sector}")

        if intent == Intent.SIMPLE_CHAT:
            trace.advance(TurnState.CONVERSING)
            content = compose_conversation(message, history, llm=self.llm, config=self.config)
            return self._finish(trace, ChatResponse(
                content=content,
                intent=intent,
                mode=ChatMode.CONVERSATION,
                sector=sector,
                suggestions=generate_suggestions(intent, None, []),
            ))

        # ─── Step 2: attributes ───
        filters = extract_attributes(message, history, llm=self.llm)
        if not filters.is_search:
            trace.advance(TurnState.QUALIFYING)
            return self._finish(trace, ChatResponse(
                content=compose_qualification(filters),
                intent=intent,
                mode=ChatMode.CONVERSATION,
                search_filters=filters,
                sector=sector,
                suggestions=generate_suggestions(intent, filters, []),
            ))

        # ─── Step 3: search ───
        trace.advance(TurnState.SEARCHING)
        candidates = search_products(
            filters, self.catalog,
            scope_id=scope_id, scope_field=scope_field,
            limit=self.top_n * 3,
        )

        # ─── Step 4: rank ───
        trace.advance(TurnState.RANKING)
        ranked = rank_products(candidates, self._ranking_query(message, filters), top_n=self.top_n)
        products: List[Product] = [s.product for s in ranked]
        if ranked:
            logger.info(
                "Step 4: top scores | " +
                ", ".join(f"{s.product.id}={s.relevance_score}" for s in ranked)
            )

        # ─── Step 5: compose ───
        trace.advance(TurnState.COMPOSING)
        content = compose(products, message, filters, llm=self.llm, config=self.config)
        return self._finish(trace, ChatResponse(
            content=content,
            intent=intent,
            mode=ChatMode.PRODUCT_SHOW,
            products=products,
            search_filters=filters,
            sector=sector,
            suggestions=generate_suggestions(intent, filters, products),
        ))

    @staticmethod
    def _ranking_query(message: str, filters: AttributeFilter) -> str:
        # Pronoun turns ("tu as ça en bleu ?") carry the type only in the filters
        if filters.type and not contains_keyword(normalize(message), filters.type):
            return f"{filters.type} {message}"
        return message

    @staticmethod
    def _finish(trace: TurnTrace, response: ChatResponse) -> ChatResponse:
        trace.advance(TurnState.DONE)
        logger.info(f"Flow: {trace.path}")
        return response


def build_default_engine() -> OmniaChat:
    """Engine wired from environment settings; missing credentials disable a collaborator."""
    catalog = CatalogClient()
    if not catalog.is_configured:
        logger.warning("SUPABASE_URL / SUPABASE_KEY not set, product search disabled")
        catalog = None

    llm = None
    if LLM_FALLBACK_ENABLED:
        try:
            llm = LLMClient()
        except ValueError as e:
            logger.warning(f"LLM client disabled, replies will use templates | error={str(e)}")
    if llm is not None and not llm.is_configured:
        logger.warning("LLM API key not set, replies will use templates")
        llm = None

    try:
        config = load_assistant_config()
    except ValueError as e:
        logger.warning(f"Invalid assistant settings, using defaults | error={str(e)}")
        config = AssistantConfig()
    return OmniaChat(catalog=catalog, llm=llm, config=config)


_default_engine: Optional[OmniaChat] = None


def omnia_chat(
    message: str,
    history: Optional[HistoryLike] = None,
    scope_id: Optional[str] = None,
    scope_field: str = "store_id",
) -> ChatResponse:
    """Module-level convenience over a lazily built default engine."""
    global _default_engine
    if _default_engine is None:
        _default_engine = build_default_engine()
    return _default_engine.chat(message, history, scope_id=scope_id, scope_field=scope_field)
