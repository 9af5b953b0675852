"""Application settings."""

import os
from pathlib import Path

# Database
DB_PATH = os.getenv("CHAMBER_DB_PATH", "chamber.duckdb")

# Logging
LOG_DIR = Path("logs")

# Chamber
DEFAULT_QUORUM = int(os.getenv("CHAMBER_DEFAULT_QUORUM", "0")) or None

# Notifications
NOTIFY_URL = os.getenv("CHAMBER_NOTIFY_URL")
NOTIFY_TIMEOUT = int(os.getenv("CHAMBER_NOTIFY_TIMEOUT", "10"))
PUBLISH_ATTEMPTS = 3
OUTBOX_BATCH_SIZE = 100
