"""Root conftest — shared test configuration."""

import os

# Remote providers off: tests exercise the local fallbacks unless they inject fakes
os.environ["ANTHROPIC_API_KEY"] = ""
os.environ["MODERATION_API_KEY"] = ""
os.environ.setdefault(
    "DATABASE_URL",
    "sqlite+aiosqlite:///test.db",
)
