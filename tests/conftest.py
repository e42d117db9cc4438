"""Root conftest — shared test configuration."""

import os

# Ensure tests never touch a developer's store; fixtures build their own under tmp_path
os.environ.setdefault(
    "DATABASE_URL",
    "sqlite+aiosqlite:///test.db",
)
os.environ.setdefault("RUN_MIGRATIONS_ON_STARTUP", "false")
