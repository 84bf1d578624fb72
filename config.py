import os
import yaml

ROOT_PATH = os.path.dirname(__file__)
CONFIG_FILE_PATH = os.path.join(ROOT_PATH, "env.yaml")

if os.path.exists(CONFIG_FILE_PATH):
    with open(CONFIG_FILE_PATH, "r") as r_file:
        data = yaml.safe_load(r_file) or dict()
else:
    data = dict()


class ApplicationConfig:
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./test.db")
    API_PREFIX = data.get("API_PREFIX", "/api")
    API_PORT = data.get("API_PORT", 8000)
    API_HOST = data.get("API_HOST", "0.0.0.0")
    CORS_ORIGINS = data.get("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = data.get("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")
    ENABLE_LOGGING_MIDDLEWARE = bool(data.get("ENABLE_LOGGING_MIDDLEWARE", 1))

    # Activity price + plan catalog, loaded once at startup
    CATALOG_FILE_PATH = data.get("CATALOG_FILE_PATH", os.path.join(ROOT_PATH, "catalog.yaml"))

    # Debit policy
    DEFAULT_DEBIT_PREFERENCE = data.get("DEFAULT_DEBIT_PREFERENCE", "BONUS_FIRST")
    ADMIN_DEDUCT_PREFERENCE = data.get("ADMIN_DEDUCT_PREFERENCE", "CURRENT_FIRST")
    REJECT_QUANTITY_FOR_FIXED_PRICE = bool(data.get("REJECT_QUANTITY_FOR_FIXED_PRICE", False))

    # Retry policy for read-only operations
    READ_RETRY_ATTEMPTS = data.get("READ_RETRY_ATTEMPTS", 3)
    READ_RETRY_BASE_DELAY = data.get("READ_RETRY_BASE_DELAY", 0.05)  # seconds
    READ_RETRY_MAX_DELAY = data.get("READ_RETRY_MAX_DELAY", 1.0)  # seconds

    # Plan expiry sweep (invoked by an external scheduler)
    PLAN_EXPIRY_ENABLED = bool(data.get("PLAN_EXPIRY_ENABLED", True))

    # Ledger reconciliation
    RECONCILIATION_ENABLED = bool(data.get("RECONCILIATION_ENABLED", True))
