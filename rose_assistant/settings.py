import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

BASE_DIR = Path(__file__).resolve().parent.parent
DATA_DIR = BASE_DIR / "data"

# Catalog & knowledge base
CATALOG_PATH = os.getenv("CATALOG_PATH", str(DATA_DIR / "catalog.json"))

# Storefront API (optional live catalog)
WEBSITE_API_URL = os.getenv("WEBSITE_API_URL", "https://www.rosechemicals.in")
WEBSITE_API_ENABLED = os.getenv("WEBSITE_API_ENABLED", "1") == "1"
WEBSITE_API_TIMEOUT = float(os.getenv("WEBSITE_API_TIMEOUT", "10"))
WEBSITE_CACHE_TTL = float(os.getenv("WEBSITE_CACHE_TTL", str(30 * 60)))

# WhatsApp Cloud API
WHATSAPP_ACCESS_TOKEN = os.getenv("WHATSAPP_ACCESS_TOKEN")
WHATSAPP_PHONE_NUMBER_ID = os.getenv("WHATSAPP_PHONE_NUMBER_ID")
WHATSAPP_VERIFY_TOKEN = os.getenv("WHATSAPP_VERIFY_TOKEN")
WHATSAPP_API_VERSION = os.getenv("WHATSAPP_API_VERSION", "v17.0")

# Conversation
DEFAULT_LANGUAGE = os.getenv("DEFAULT_LANGUAGE", "en-IN")
HISTORY_WINDOW = int(os.getenv("HISTORY_WINDOW", "6"))
MAX_STORED_MESSAGES = int(os.getenv("MAX_STORED_MESSAGES", "50"))
MAX_SESSIONS = int(os.getenv("MAX_SESSIONS", "1000"))
SUPPORT_PHONE = os.getenv("SUPPORT_PHONE", "+91 8610570490")
PROMPT_BASE = os.getenv("PROMPT_BASE", str(BASE_DIR / "config" / "prompts"))

# Analytics & logging
ANALYTICS_PATH = os.getenv("ANALYTICS_PATH", str(DATA_DIR / "analytics_events.jsonl"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
