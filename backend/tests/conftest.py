import os
import tempfile

# Configuration is read at import time, so the test environment is set
# before any talkpdf module is imported.
os.environ.update({
    "ENVIRONMENT": "test",
    "DATABASE_TYPE": "memory",
    "STORAGE_TYPE": "local",
    "LOCAL_STORAGE_DIR": tempfile.mkdtemp(prefix="talkpdf-tests-"),
    "AUTH_PROVIDER": "static",
    "STATIC_AUTH_TOKENS": "token-alice:alice,token-bob:bob,token-carol:carol",
    "AI_PROVIDER": "mock",
    "OPENROUTER_API_KEY": "",
    "ANTHROPIC_API_KEY": "",
    "YARNGPT_API_KEY": "",
    "GEMINI_API_KEY": "",
    "ELEVENLABS_API_KEY": "",
    "RATE_LIMIT_ENABLED": "false",
    "PROCESS_RATE_LIMIT_WINDOW_MS": "60000",
    "PROCESS_RATE_LIMIT_MAX_REQUESTS": "5",
    "MAX_PROCESSING_WORKERS": "2",
})

import pytest

from talkpdf.core.plans import PLAN_LIMITS
from talkpdf.services.database import MemoryAdapter
from talkpdf.services.storage import LocalFileStorage


@pytest.fixture
def free_plan():
    return PLAN_LIMITS["free"]


@pytest.fixture
def plus_plan():
    return PLAN_LIMITS["plus"]


@pytest.fixture
def db():
    return MemoryAdapter()


@pytest.fixture
def storage(tmp_path):
    return LocalFileStorage(base_dir=tmp_path / "storage")
