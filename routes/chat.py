"""
Chat endpoint as a Flask Blueprint.
"""

import time

from flask import Blueprint, request, jsonify

from models import ChatResponse
from omnia_chat import build_default_engine
from services.product_formatter import format_product, summarize_products
from chat_logger import get_logger, sanitize_log_string

logger = get_logger("omnia_chat")

chat_bp = Blueprint("chat", __name__)

# Built once per process from environment settings
chat_engine = build_default_engine()


def _response_to_json(response: ChatResponse) -> dict:
    """ChatResponse in the widget's camelCase wire format."""
    return {
        "role": response.role,
        "content": response.content,
        "intent": response.intent.value,
        "mode": response.mode.value,
        "products": [format_product(p) for p in response.products],
        "searchFilters": response.search_filters.to_dict() if response.search_filters else None,
        "sector": response.sector,
        "suggestions": response.suggestions,
        "summary": summarize_products(response.products) if response.products else None,
    }


@chat_bp.route("/chat", methods=["POST"])
def chat():
    """
    Main chat endpoint.

    Request:
        POST /chat
        {
            "userMessage": "je cherche une table basse scandinave",
            "history": [{"role": "user", "content": "..."}, ...],
            "storeId": "store-1"            (or "sellerId")
        }

    Response:
        {
            "role": "assistant",
            "content": "...",
            "intent": "product_show",
            "mode": "product_show",
            "products": [...],
            "searchFilters": {...},
            "sector": "meubles",
            "suggestions": [...],
            "summary": {...}
        }
    """
    start_time = time.time()

    # ─── Parse request ───
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        logger.warning("POST /chat | Invalid JSON body")
        return jsonify({"error": "Invalid JSON body"}), 400

    message = body.get("userMessage")
    if message is None:
        message = body.get("message")
    if not isinstance(message, str) or not message.strip():
        logger.warning("POST /chat | Missing userMessage")
        return jsonify({"error": "userMessage is required"}), 400

    history = body.get("history") or []
    if not isinstance(history, list):
        logger.warning("POST /chat | history is not a list")
        return jsonify({"error": "history must be a list of messages"}), 400

    scope_id, scope_field = None, "store_id"
    if body.get("storeId"):
        scope_id = str(body["storeId"])
    elif body.get("sellerId"):
        scope_id, scope_field = str(body["sellerId"]), "seller_id"

    truncated_msg = message[:100] + "..." if len(message) > 100 else message
    logger.info(
        f'POST /chat | message="{sanitize_log_string(truncated_msg)}" | '
        f'history={len(history)} | {scope_field}={scope_id}'
    )

    try:
        response = chat_engine.chat(
            message.strip(), history, scope_id=scope_id, scope_field=scope_field,
        )
        payload = _response_to_json(response)
    except Exception as e:
        logger.error(f"POST /chat | Unhandled error | error={str(e)}", exc_info=True)
        return jsonify({"error": "Internal server error", "message": str(e)}), 500

    logger.info(
        f"POST /chat | intent={payload['intent']} | products={len(payload['products'])} | "
        f"time={int((time.time() - start_time) * 1000)}ms"
    )
    return jsonify(payload), 200
