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
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./storefront.db")
    TENANT_DB_URI_TEMPLATE = data.get(
        "TENANT_DB_URI_TEMPLATE", "sqlite+aiosqlite:///./tenants/{scope}.db"
    )
    TENANT_SCOPE_PREFIX = data.get("TENANT_SCOPE_PREFIX", "db_")
    DB_OPERATION_TIMEOUT = float(data.get("DB_OPERATION_TIMEOUT", 10))
    FULFILLMENT_MAX_ATTEMPTS = int(data.get("FULFILLMENT_MAX_ATTEMPTS", 5))
    FULFILLMENT_INITIAL_BACKOFF_MS = int(data.get("FULFILLMENT_INITIAL_BACKOFF_MS", 50))
    API_PREFIX = data.get("API_PREFIX", "/api")
    API_PORT = data.get("API_PORT", 8000)
    API_HOST = data.get("API_HOST", "0.0.0.0")
    CORS_ORIGINS = data.get("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = data.get("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")
    ADMIN_API_KEY = data.get("ADMIN_API_KEY", "test-admin-key-12345")
