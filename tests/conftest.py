"""Root conftest — shared test configuration."""

import os

# Ensure tests never touch a real database or ship JSON logs to stdout
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///test.db")
os.environ.setdefault("DATABASE_AUTO_CREATE", "false")
os.environ.setdefault("EVENT_LOG_ENABLED", "false")
