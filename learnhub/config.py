"""
LearnHub Configuration
Database, auth, certificate storage and pagination settings
"""

import os

# MongoDB
MONGO_URL = os.getenv("MONGO_URL", "mongodb://localhost:27017")
MONGO_DB_NAME = os.getenv("MONGO_DB_NAME", "learnhub_db")

# Bearer tokens (issued by the auth service, verified here)
JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", "change-me")
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")

# Certificate files
CERTIFICATES_DIR = os.getenv("CERTIFICATES_DIR", os.path.join("uploads", "certificates"))
CERTIFICATES_URL_PREFIX = os.getenv("CERTIFICATES_URL_PREFIX", "/uploads/certificates")
PLATFORM_NAME = os.getenv("PLATFORM_NAME", "LEARNHUB")
PLATFORM_TAGLINE = os.getenv("PLATFORM_TAGLINE", "Online Learning Platform")
VERIFY_URL = os.getenv("VERIFY_URL", "learnhub.com/verify")

# Course counters: read-modify-write by default, $inc/$addToSet when enabled
ATOMIC_COURSE_COUNTERS = os.getenv("ATOMIC_COURSE_COUNTERS", "false").lower() in ("1", "true", "yes")

# HTTP
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "http://localhost:3000,http://localhost:3001").split(",") if o.strip()]
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# Pagination
DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100
