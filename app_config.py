"""
Application configuration module for the OmnIA Chat API.
Contains environment variables, constants, and settings.
"""

import os
from dotenv import load_dotenv

load_dotenv()

# ═══════════════════════════════════════════
# ENVIRONMENT VARIABLES
# ═══════════════════════════════════════════

PORT = int(os.getenv("PORT", 5009))
DEBUG = os.getenv("DEBUG", "false").lower() == "true"
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# ═══════════════════════════════════════════
# CATALOG (Supabase PostgREST)
# ═══════════════════════════════════════════

SUPABASE_URL = os.getenv("SUPABASE_URL", "").rstrip("/")
SUPABASE_KEY = os.getenv("SUPABASE_KEY") or os.getenv("SUPABASE_SERVICE_ROLE_KEY", "")
CATALOG_TABLE = os.getenv("CATALOG_TABLE", "shopify_products")
CATALOG_TIMEOUT_SECONDS = int(os.getenv("CATALOG_TIMEOUT_SECONDS", "15"))

# ═══════════════════════════════════════════
# SEARCH & RANKING
# ═══════════════════════════════════════════

SEARCH_LIMIT = int(os.getenv("SEARCH_LIMIT", "12"))   # Rows fetched when no ranking pass follows
TOP_N = int(os.getenv("TOP_N", "6"))                  # Products returned to the user
HISTORY_WINDOW = int(os.getenv("HISTORY_WINDOW", "6"))

# ═══════════════════════════════════════════
# LLM CONFIGURATION
# ═══════════════════════════════════════════

# LLM Provider settings
LLM_PROVIDER = os.getenv("LLM_PROVIDER", "deepseek")  # deepseek, openai, proxy
LLM_MODEL = os.getenv("LLM_MODEL", "deepseek-chat")
LLM_API_KEY = os.getenv("LLM_API_KEY") or os.getenv("DEEPSEEK_API_KEY", "")
LLM_API_BASE_URL = os.getenv("LLM_API_BASE_URL", "")

# LLM behavior settings
LLM_TEMPERATURE = float(os.getenv("LLM_TEMPERATURE", "0.7"))
LLM_MAX_TOKENS = int(os.getenv("LLM_MAX_TOKENS", "300"))
LLM_TIMEOUT_SECONDS = int(os.getenv("LLM_TIMEOUT_SECONDS", "20"))
LLM_MAX_RETRIES = int(os.getenv("LLM_MAX_RETRIES", "2"))
LLM_RETRY_BACKOFF_SECONDS = float(os.getenv("LLM_RETRY_BACKOFF_SECONDS", "1.0"))

# Feature flags
LLM_FALLBACK_ENABLED = os.getenv("LLM_FALLBACK_ENABLED", "true").lower() == "true"

# ═══════════════════════════════════════════
# ASSISTANT PERSONA
# ═══════════════════════════════════════════

ASSISTANT_NAME = os.getenv("ASSISTANT_NAME", "OmnIA")
ASSISTANT_TONE = os.getenv("ASSISTANT_TONE", "friendly")               # professional, friendly, enthusiastic, casual
ASSISTANT_RESPONSE_LENGTH = os.getenv("ASSISTANT_RESPONSE_LENGTH", "balanced")  # concise, balanced, detailed
ASSISTANT_LANGUAGE = os.getenv("ASSISTANT_LANGUAGE", "fr")

# ═══════════════════════════════════════════
# HTTP / CORS
# ═══════════════════════════════════════════

CORS_METHODS = ["GET", "POST", "PUT", "DELETE", "OPTIONS"]
CORS_HEADERS = ["Content-Type", "Authorization", "X-Client-Info", "Apikey"]
