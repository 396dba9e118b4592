import os
from dotenv import load_dotenv

load_dotenv()

# Couchlytics backend
API_BASE_URL = (
    os.getenv("COUCHLYTICS_API_BASE")
    or os.getenv("COUCHLYTICS_API_BASE_URL")
    or "https://api.couchlytics.com"
)
API_TIMEOUT = float(os.getenv("COUCHLYTICS_API_TIMEOUT", "30"))
API_MAX_RETRIES = int(os.getenv("COUCHLYTICS_API_MAX_RETRIES", "3"))
API_RATE_LIMIT_DELAY = float(os.getenv("COUCHLYTICS_API_RATE_LIMIT_DELAY", "0"))

# League player pages are requested in one shot for the trade picker
PLAYERS_PAGE_SIZE = 5000

# Trade preview service
DEBUG = os.getenv("COUCHLYTICS_DEBUG", "false").lower() in ("1", "true", "yes")
CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv(
        "COUCHLYTICS_CORS_ORIGINS", "http://localhost:3000,http://localhost:8080"
    ).split(",")
    if origin.strip()
]
VERSION = "1.0.0"
