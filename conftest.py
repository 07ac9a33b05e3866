"""Global pytest configuration."""

import os

# Keep tests on in-memory stores and an in-memory SQLite URL before any imports
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("USE_INMEMORY_STORE", "true")
os.environ.setdefault("NOTIFICATION_WEBHOOK_URL", "")
