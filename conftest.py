"""Global pytest configuration."""

import os

# Tests run offline: no remote store unless a test builds one, stub generation client
os.environ.setdefault("DATABASE_URL", "")
os.environ.setdefault("OPENAI_API_KEY", "")
