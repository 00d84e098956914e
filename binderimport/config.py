from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(env_file=".env")

    app_name: str = "BinderImport"
    debug: bool = False

    binder_api_url: str = "http://localhost:3001/api"

    # Forwarded as a bearer token when set
    binder_api_token: str = ""

    request_timeout: float = 30.0


settings = Settings()


# =============================================================================
# IMPORT PIPELINE LIMITS
# =============================================================================

# Parsing stops at this many non-blank data rows
MAX_ROWS = 1000

# Uploads above this size are rejected before parsing (5 MiB)
MAX_FILE_SIZE = 5 * 1024 * 1024

# Rows per commit call once an import is split into batches
BATCH_SIZE = 50

# Imports up to this size are committed in one call
SINGLE_BATCH_THRESHOLD = 100

# Decklist lines sampled for format detection
FORMAT_SAMPLE_LINES = 20
