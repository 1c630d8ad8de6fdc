# storefront/utils/settings.py
import os
from dotenv import load_dotenv

load_dotenv()

API_BASE_URL = os.getenv("API_BASE_URL", "http://localhost:3000/api/v1")
HTTP_TIMEOUT_SECONDS = float(os.getenv("HTTP_TIMEOUT_SECONDS", 30))
HTTP_RETRY_ATTEMPTS = int(os.getenv("HTTP_RETRY_ATTEMPTS", 3))

REDIS_URL = os.getenv("REDIS_URL", "redis://localhost:6379/0")
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./storefront.db")
KV_BACKEND = os.getenv("KV_BACKEND", "memory")  # memory | redis | sql

GUEST_CART_KEY = os.getenv("GUEST_CART_KEY", "kenbike_guest_cart")
LOCALE_KEY = os.getenv("LOCALE_KEY", "locale")
DEFAULT_LOCALE = os.getenv("DEFAULT_LOCALE", "id")
LOCALE_TTL_SECONDS = int(os.getenv("LOCALE_TTL_SECONDS", 365 * 24 * 60 * 60))

PAYMENT_CHECK_INTERVAL_SECONDS = float(os.getenv("PAYMENT_CHECK_INTERVAL_SECONDS", 5.0))
PAYMENT_INITIAL_DELAY_SECONDS = float(os.getenv("PAYMENT_INITIAL_DELAY_SECONDS", 2.0))
PAYMENT_DEADLINE_HOURS = int(os.getenv("PAYMENT_DEADLINE_HOURS", 24))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
