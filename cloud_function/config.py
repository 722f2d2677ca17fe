import os

# === Configuration ===
PROJECT_ID = os.environ.get("GCP_PROJECT_ID", "")
BUCKET_NAME = os.environ.get("GCS_BUCKET_NAME", "")

# API Keys
OPENAI_API_KEY = os.environ.get("OPENAI_API_KEY", "")
GOOGLE_BOOKS_API_KEY = os.environ.get("GOOGLE_BOOKS_API_KEY", "")

# === GCS-based Configuration Loader ===
# Load dynamic configuration from GCS (with caching and env fallback)
_config_loader = None

def get_config_loader():
    """Get or create the global config loader instance."""
    global _config_loader
    if _config_loader is None and BUCKET_NAME:
        from services.config_loader import ConfigLoader
        _config_loader = ConfigLoader(BUCKET_NAME)
    return _config_loader

# Load configuration with GCS priority and env fallback
def get_config_value(key_path: str, env_var: str = None, default=None):
    """
    Get configuration value with priority: GCS config > ENV var > default.

    Args:
        key_path: Dot-notation path in GCS config (e.g., 'openai.model')
        env_var: Optional environment variable name to check as fallback
        default: Default value if not found
    """
    loader = get_config_loader()

    # Try GCS config first
    if loader:
        value = loader.get(key_path)
        if value is not None:
            return value

    # Fall back to environment variable
    if env_var:
        env_value = os.environ.get(env_var)
        if env_value is not None:
            return env_value

    # Return default
    return default

# === OpenAI ===
OPENAI_MODEL = get_config_value(
    "openai.model",
    "OPENAI_MODEL",
    "gpt-3.5-turbo"
)

# Overall bound on a single generation call
OPENAI_TIMEOUT_SECONDS = float(get_config_value(
    "openai.timeout_seconds",
    "OPENAI_TIMEOUT_SECONDS",
    "60"
))

# === Usage limits ===
MAX_REQUESTS_PER_HOUR = int(get_config_value(
    "limits.max_requests_per_hour",
    "MAX_REQUESTS_PER_HOUR",
    "10"
))

MAX_REQUESTS_PER_MONTH = int(get_config_value(
    "limits.max_requests_per_month",
    "MAX_REQUESTS_PER_MONTH",
    "1000"
))

# "firestore" in production, "memory" for local runs
COUNTER_BACKEND = get_config_value(
    "counters.backend",
    "COUNTER_BACKEND",
    "firestore"
)

# === Retry / throttle ===
RETRY_MAX_ATTEMPTS = int(get_config_value(
    "retry.max_attempts",
    "RETRY_MAX_ATTEMPTS",
    "3"
))

RETRY_BASE_DELAY_SECONDS = float(get_config_value(
    "retry.base_delay_seconds",
    "RETRY_BASE_DELAY_SECONDS",
    "0.5"
))

RETRY_BACKOFF_MULTIPLIER = float(get_config_value(
    "retry.backoff_multiplier",
    "RETRY_BACKOFF_MULTIPLIER",
    "2.0"
))

THROTTLE_MIN_SPACING_SECONDS = float(get_config_value(
    "throttle.min_spacing_seconds",
    "THROTTLE_MIN_SPACING_SECONDS",
    "0.5"
))

# === CORS ===
_origins = get_config_value(
    "cors.allowed_origins",
    "CORS_ALLOWED_ORIGINS",
    "http://localhost:4200,https://smartlibroai.web.app"
)
CORS_ALLOWED_ORIGINS = (
    [o.strip() for o in _origins.split(",") if o.strip()]
    if isinstance(_origins, str) else list(_origins)
)
