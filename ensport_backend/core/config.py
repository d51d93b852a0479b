# ensport_backend/core/config.py
# Global configuration for EN Sport Alerts, read from the environment (.env supported)

import os
from dotenv import load_dotenv

load_dotenv()

# TEST_MODE:
# When True, the app is running under the test suite.
# Effects:
#   - Startup skips auto-seeding (tests seed what they need)
TEST_MODE = os.getenv("TEST_MODE", "false").lower() in ("1", "true", "yes")

# --- Database ---
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite+aiosqlite:///./ensport.db")
AUTO_SEED = os.getenv("AUTO_SEED", "true").lower() in ("1", "true", "yes")

# --- Sessions ---
SECRET_KEY = os.getenv("SECRET_KEY", "change-me-in-production")
SESSION_MAX_AGE_SECONDS = int(os.getenv("SESSION_MAX_AGE_SECONDS", 24 * 60 * 60))
BCRYPT_ROUNDS = int(os.getenv("BCRYPT_ROUNDS", 12))

# --- Admin accounts ---
PROTECTED_ADMIN_USERNAME = os.getenv("PROTECTED_ADMIN_USERNAME", "admin")
DEFAULT_ADMIN_USERNAME = os.getenv("DEFAULT_ADMIN_USERNAME", PROTECTED_ADMIN_USERNAME)
DEFAULT_ADMIN_PASSWORD = os.getenv("DEFAULT_ADMIN_PASSWORD", "")

# --- Email (Resend) ---
RESEND_API_KEY = os.getenv("RESEND_API_KEY", "")
RESEND_API_URL = os.getenv("RESEND_API_URL", "https://api.resend.com/emails")
FROM_EMAIL = os.getenv("FROM_EMAIL", "noreply@yourdomain.com")
SITE_NAME = "EN Sport Alerts"

# --- Image host (Cloudinary) ---
CLOUDINARY_CLOUD_NAME = os.getenv("CLOUDINARY_CLOUD_NAME", "")
CLOUDINARY_API_KEY = os.getenv("CLOUDINARY_API_KEY", "")
CLOUDINARY_API_SECRET = os.getenv("CLOUDINARY_API_SECRET", "")
CLOUDINARY_API_BASE_URL = "https://api.cloudinary.com/v1_1"

# --- Outbound HTTP ---
HTTP_TIMEOUT_SECONDS = float(os.getenv("HTTP_TIMEOUT_SECONDS", 10))

# --- Scheduler ---
# Shared secret expected in the X-Scheduler-Token header (empty = open)
SCHEDULER_SECRET = os.getenv("SCHEDULER_SECRET", "")

# --- HTTP ---
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# =====================================
# Domain constants
# =====================================
TIMEZONE_NAME = "Asia/Bangkok"
UTC_OFFSET_LABEL = "+07:00"

REMINDER_LEAD_MINUTES = 24 * 60
REMINDER_TOLERANCE_MINUTES = 5

# Sliding-window rate limits: max requests per window
RATE_LIMITS = {
    "general": {"max": 100, "window_seconds": 15 * 60},
    "auth": {"max": 5, "window_seconds": 15 * 60},
    "upload": {"max": 10, "window_seconds": 60 * 60},
}

# --- Banners ---
BANNER_FOLDER = os.getenv("BANNER_FOLDER", "KKUENSPORT/Banner")
BANNER_WIDTH = 1600
BANNER_HEIGHT = 500
BANNER_QUALITY = 95
BANNER_HISTORY_LIMIT = 20
MAX_IMAGE_SIZE = 10 * 1024 * 1024  # 10MB
ALLOWED_IMAGE_TYPES = {"image/jpeg", "image/jpg", "image/png", "image/gif", "image/webp"}
