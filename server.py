"""
OmnIA Chat — API Backend
Runs on port 5009 with /chat endpoint.

Usage:
    python server.py

Endpoint:
    POST http://localhost:5009/chat
    Body: {"userMessage": "...", "history": [...], "storeId": "..."}
"""

from datetime import datetime, timezone
from dotenv import load_dotenv

load_dotenv()

from flask import Flask, jsonify
from flask_cors import CORS

from routes import chat as chat_routes
from routes.chat import chat_bp
from chat_logger import get_logger
from app_config import PORT, DEBUG, CORS_METHODS, CORS_HEADERS

# ─── Initialize logger ───
logger = get_logger("omnia_chat")

# ═══════════════════════════════════════════
# FLASK APP
# ═══════════════════════════════════════════

app = Flask(__name__)
CORS(app, origins="*", send_wildcard=True, methods=CORS_METHODS, allow_headers=CORS_HEADERS)
app.register_blueprint(chat_bp)


@app.route("/health", methods=["GET"])
def health():
    """Health check endpoint."""
    engine = chat_routes.chat_engine
    return jsonify({
        "status": "ok",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "catalog_configured": engine.catalog is not None,
        "llm_configured": engine.llm is not None,
    })


# ═══════════════════════════════════════════
# STARTUP
# ═══════════════════════════════════════════

if __name__ == "__main__":
    print("=" * 60)
    print("  OmnIA — Chat API Server")
    print("=" * 60)
    print()
    print(f"🚀 Starting server on http://localhost:{PORT}")
    print(f"   POST http://localhost:{PORT}/chat")
    print(f"   GET  http://localhost:{PORT}/health")
    print()

    app.run(
        host="0.0.0.0",
        port=PORT,
        debug=DEBUG,
    )
