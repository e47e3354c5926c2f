"""Global pytest configuration."""

import os

# Set DATABASE_URL and provider credentials for tests before any imports
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("AMADEUS_CLIENT_ID", "test-client-id")
os.environ.setdefault("AMADEUS_CLIENT_SECRET", "test-client-secret")
