"""
Storefront - Centralized Configuration
=======================================
All environment variables and constants are loaded here.
No other module should call os.getenv() directly.
"""

import os
from dotenv import load_dotenv

load_dotenv()


# ==========================================
# 🗄️ Database
# ==========================================
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./storefront.db")

# Seconds a SQLite connection waits on a locked database before failing
SQLITE_BUSY_TIMEOUT = float(os.getenv("SQLITE_BUSY_TIMEOUT", "30"))


# ==========================================
# 🔐 Security
# ==========================================
SECRET_KEY = os.getenv("SECRET_KEY")

if not SECRET_KEY:
    print("[WARNING] SECRET_KEY missing in .env, using insecure development key")
    SECRET_KEY = "storefront-dev-secret"

ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = 60 * 24  # 1 day


# ==========================================
# 🧾 Checkout
# ==========================================
ORDER_COMMIT_MAX_ATTEMPTS = int(os.getenv("ORDER_COMMIT_MAX_ATTEMPTS", "3"))
ORDER_COMMIT_RETRY_BACKOFF = float(os.getenv("ORDER_COMMIT_RETRY_BACKOFF", "0.05"))  # seconds, x attempt
ORDER_COMMIT_TIMEOUT_SECONDS = int(os.getenv("ORDER_COMMIT_TIMEOUT_SECONDS", "10"))

# Upper bound for a single cart line
CART_MAX_LINE_QUANTITY = int(os.getenv("CART_MAX_LINE_QUANTITY", "1000"))

# Pending orders older than this are cancelled by the background sweep
ORDER_PENDING_EXPIRE_MINUTES = int(os.getenv("ORDER_PENDING_EXPIRE_MINUTES", "30"))
EXPIRED_ORDER_SWEEP_SECONDS = int(os.getenv("EXPIRED_ORDER_SWEEP_SECONDS", "60"))


# ==========================================
# 🔧 App
# ==========================================
DEBUG = os.getenv("DEBUG", "false").lower() == "true"
SCHEDULER_ENABLED = os.getenv("SCHEDULER_ENABLED", "true").lower() == "true"
