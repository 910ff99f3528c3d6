"""
Configuration Management

Centralizes all configurable settings with environment variable overrides.
"""

import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv


def _get_project_root() -> Path:
    """Get the project root directory."""
    return Path(__file__).parent.parent


load_dotenv(_get_project_root() / ".env")


def get_env(key: str, default: Optional[str] = None, required: bool = False) -> Optional[str]:
    """Get environment variable with optional default."""
    value = os.environ.get(key, default)
    if required and not value:
        raise ValueError(
            f"Required environment variable {key} is not set. "
            f"Set it with: export {key}='your-value'"
        )
    return value


# =============================================================================
# Data Paths
# =============================================================================

# Project root for relative paths
PROJECT_ROOT = _get_project_root()

# Persistent key-value store (quotes, selected category, sync log)
STATE_DB = Path(
    get_env("QUOTESYNC_STATE_DB", str(PROJECT_ROOT / "quotes_state.db"))
)

# Where exported quotes.json files are written
EXPORT_DIR = Path(get_env("QUOTESYNC_EXPORT_DIR", "."))

# Export filename, fixed
EXPORT_FILENAME = "quotes.json"


# =============================================================================
# Remote Configuration
# =============================================================================

# Endpoint used for both fetching (GET) and posting (POST) quotes
REMOTE_URL = get_env("QUOTESYNC_REMOTE_URL", "https://jsonplaceholder.typicode.com/posts")

# Only the first N remote records are taken on each sync
REMOTE_LIMIT = int(get_env("QUOTESYNC_REMOTE_LIMIT", "10"))

# HTTP timeout in seconds
REMOTE_TIMEOUT = float(get_env("QUOTESYNC_REMOTE_TIMEOUT", "10"))


# =============================================================================
# Sync Configuration
# =============================================================================

# Category given to remote records that carry none
DEFAULT_SERVER_CATEGORY = get_env("QUOTESYNC_SERVER_CATEGORY", "Server")

# Auto-sync period in seconds
AUTO_SYNC_INTERVAL = float(get_env("QUOTESYNC_AUTO_SYNC_INTERVAL", "30"))

# Reject a second sync while one is still running
SYNC_EXCLUSIVE = get_env("QUOTESYNC_SYNC_EXCLUSIVE", "false").lower() == "true"


# =============================================================================
# Logging
# =============================================================================

LOG_LEVEL = get_env("QUOTESYNC_LOG_LEVEL", "INFO").upper()


# =============================================================================
# Helper to print current configuration
# =============================================================================

def print_config():
    """Print current configuration (for debugging)."""
    print("Current Configuration:")
    print(f"  QUOTESYNC_STATE_DB: {STATE_DB}")
    print(f"  QUOTESYNC_EXPORT_DIR: {EXPORT_DIR}")
    print(f"  QUOTESYNC_REMOTE_URL: {REMOTE_URL}")
    print(f"  QUOTESYNC_REMOTE_LIMIT: {REMOTE_LIMIT}")
    print(f"  QUOTESYNC_REMOTE_TIMEOUT: {REMOTE_TIMEOUT}")
    print(f"  QUOTESYNC_SERVER_CATEGORY: {DEFAULT_SERVER_CATEGORY}")
    print(f"  QUOTESYNC_AUTO_SYNC_INTERVAL: {AUTO_SYNC_INTERVAL}")
    print(f"  QUOTESYNC_SYNC_EXCLUSIVE: {SYNC_EXCLUSIVE}")
    print(f"  QUOTESYNC_LOG_LEVEL: {LOG_LEVEL}")
