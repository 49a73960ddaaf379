import os
from dotenv import load_dotenv
from pathlib import Path

# Load .env manually when running outside Docker
if not os.getenv("RUNNING_IN_DOCKER"):
    dotenv_path = Path(__file__).resolve().parents[2] / ".env"
    load_dotenv(dotenv_path=dotenv_path)

# Database connection
DATABASE_URL = os.getenv("DATABASE_URL")
DB_CONFIG = {
    'database': os.getenv('DB_NAME'),
    'user': os.getenv('DB_USER'),
    'password': os.getenv('DB_PASSWORD'),
    'host': os.getenv('DB_HOST'),
    'port': int(os.getenv('DB_PORT', 5432)),
}

# Optional database SSL
DB_SSL_MODE = os.getenv('DB_SSL_MODE')  # e.g. require, verify-ca, verify-full
DB_TIMEZONE = os.getenv("DB_TIMEZONE", "Asia/Kolkata")

# JWT / Security
SECRET_KEY = os.getenv("SECRET_KEY")
ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", 90))

# CORS
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "").split(",") if o.strip()]
CORS_ALLOW_ALL = os.getenv("CORS_ALLOW_ALL", "false").lower() in ("1", "true", "yes")

# FastAPI / App
BASE_URL = os.getenv("BASE_URL", "")
ENABLE_DOCS = os.getenv("ENABLE_DOCS", "true").lower() in ("1", "true", "yes")

# Pincode directory (data.gov.in "All India Pincode Directory")
PINCODE_API_BASE_URL = os.getenv(
    "PINCODE_API_BASE_URL",
    "https://api.data.gov.in/resource/04cbe4b1-2f2b-4c39-a1d5-1c2e28bc0e32",
)
PINCODE_API_KEY = os.getenv("PINCODE_API_KEY")
PINCODE_API_TIMEOUT_SECONDS = float(os.getenv("PINCODE_API_TIMEOUT_SECONDS", 10))
PINCODE_API_MAX_RETRIES = int(os.getenv("PINCODE_API_MAX_RETRIES", 2))
PINCODE_API_BACKOFF_BASE_SECONDS = float(os.getenv("PINCODE_API_BACKOFF_BASE_SECONDS", 1))
PINCODE_API_BACKOFF_MAX_SECONDS = float(os.getenv("PINCODE_API_BACKOFF_MAX_SECONDS", 15))
PINCODE_API_PAGE_SIZE = int(os.getenv("PINCODE_API_PAGE_SIZE", 100))
PINCODE_API_PAGE_DELAY_SECONDS = float(os.getenv("PINCODE_API_PAGE_DELAY_SECONDS", 0.5))

# Delivery
DELIVERY_CACHE_TTL_SECONDS = int(os.getenv("DELIVERY_CACHE_TTL_SECONDS", 600))
FREE_SHIPPING_THRESHOLD = int(os.getenv("FREE_SHIPPING_THRESHOLD", 3000))
