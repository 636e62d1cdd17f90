"""Application constants.

This module contains magic strings and numbers used throughout the application.
Centralizing these values makes them easier to maintain and modify.
"""

# Poll Categories
# "custom" polls carry a free-text label in custom_category
POLL_CATEGORIES = ("general", "politics", "technology", "culture", "climate", "custom")
DEFAULT_CATEGORY = "general"
CUSTOM_CATEGORY = "custom"

# Poll Lifecycle
# A new poll stays open for this many hours unless archived earlier
POLL_DURATION_HOURS = 24

# Text Limits
MAX_QUESTION_LENGTH = 500
MAX_CUSTOM_CATEGORY_LENGTH = 50
MAX_COMMENT_LENGTH = 280
MAX_FINGERPRINT_LENGTH = 512

# Comments listing returns at most this many of the newest comments
COMMENTS_PAGE_SIZE = 50

# Vote Rate Limiting (per client IP, vote submissions only)
RATE_LIMIT_MAX_REQUESTS = 30
RATE_LIMIT_WINDOW_SECONDS = 60
RATE_LIMIT_CLEANUP_THRESHOLD = 1000
RATE_LIMIT_STALE_SECONDS = 3600

# Identity
# Used when no forwarded-for header reaches the app
LOOPBACK_ADDRESS = "127.0.0.1"
MAX_IP_LENGTH = 64  # width of the ip_address columns

# Default Admin
# Created by the init/bootstrap step when the admins table is empty
DEFAULT_ADMIN_USERNAME = "admin"
DEFAULT_ADMIN_PASSWORD = "admin123"

# JWT Token Configuration
# Token expiration time in minutes (8 hours)
ACCESS_TOKEN_EXPIRE_MINUTES = 480

# Read cache keys
CACHE_KEY_ACTIVE_POLL = "active_poll"
CACHE_KEY_POLL_HISTORY = "poll_history"
