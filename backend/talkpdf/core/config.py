import os
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables (only in development)
# In containers, environment variables are set directly
if os.getenv("ENVIRONMENT") != "production":
    load_dotenv()

BASE_DIR = Path(__file__).resolve().parent.parent.parent

ENVIRONMENT = os.getenv("ENVIRONMENT", "development")

# Database configuration
DATABASE_TYPE = os.getenv("DATABASE_TYPE", "memory")  # Options: 'memory', 'supabase'

# File Storage configuration
STORAGE_TYPE = os.getenv("STORAGE_TYPE", "local")  # Options: 'local', 's3', 'supabase'

# Local storage configuration
LOCAL_STORAGE_DIR = os.getenv("LOCAL_STORAGE_DIR")  # Path to local storage directory

# S3 storage configuration
S3_BUCKET_NAME = os.getenv("S3_BUCKET_NAME")
AWS_ACCESS_KEY_ID = os.getenv("AWS_ACCESS_KEY_ID")
AWS_SECRET_ACCESS_KEY = os.getenv("AWS_SECRET_ACCESS_KEY")
AWS_REGION = os.getenv("AWS_REGION", "us-east-1")
S3_ENDPOINT_URL = os.getenv("S3_ENDPOINT_URL")  # For S3-compatible services (MinIO, etc.)
S3_KEY_PREFIX = os.getenv("S3_KEY_PREFIX", "")

# Supabase configuration (database, storage and auth)
SUPABASE_URL = os.getenv("SUPABASE_URL")
SUPABASE_KEY = os.getenv("SUPABASE_KEY")
SUPABASE_STORAGE_BUCKET = os.getenv("SUPABASE_STORAGE_BUCKET", "talkpdf")

# Identity provider
AUTH_PROVIDER = os.getenv("AUTH_PROVIDER", "supabase")  # Options: 'supabase', 'static'
STATIC_AUTH_TOKENS = os.getenv("STATIC_AUTH_TOKENS", "")  # "token:user_id,token2:user_id2"

# Text understanding (extraction, summaries, translation)
AI_PROVIDER = os.getenv("AI_PROVIDER", "openrouter")  # Options: 'openrouter', 'anthropic', 'mock'
OPENROUTER_API_KEY = os.getenv("OPENROUTER_API_KEY")
AI_GATEWAY_BASE_URL = os.getenv("AI_GATEWAY_BASE_URL", "https://openrouter.ai/api/v1")
AI_TEXT_MODEL = os.getenv("AI_TEXT_MODEL", "google/gemini-2.5-flash")
ANTHROPIC_API_KEY = os.getenv("ANTHROPIC_API_KEY")
ANTHROPIC_MODEL = os.getenv("ANTHROPIC_MODEL", "claude-3-5-sonnet-20241022")

# Speech synthesis providers
YARNGPT_API_KEY = os.getenv("YARNGPT_API_KEY")
GEMINI_API_KEY = os.getenv("GEMINI_API_KEY")
ELEVENLABS_API_KEY = os.getenv("ELEVENLABS_API_KEY")
TTS_PROVIDER_ORDER = [
    name.strip().lower()
    for name in os.getenv("TTS_PROVIDER_ORDER", "yarngpt,gemini,elevenlabs").split(",")
    if name.strip()
]
TTS_TIMEOUT_SECONDS = float(os.getenv("TTS_TIMEOUT_SECONDS", "120"))

# Per-user processing admission (sliding window)
PROCESS_RATE_LIMIT_WINDOW_MS = int(os.getenv("PROCESS_RATE_LIMIT_WINDOW_MS", "60000"))
PROCESS_RATE_LIMIT_MAX_REQUESTS = int(os.getenv("PROCESS_RATE_LIMIT_MAX_REQUESTS", "5"))

# Gateway rate limiting (per client IP)
RATE_LIMIT_ENABLED = os.getenv("RATE_LIMIT_ENABLED", "true").lower() == "true"
RATE_LIMIT_PER_MINUTE = int(os.getenv("RATE_LIMIT_PER_MINUTE", "100"))

# Background processing worker pool
MAX_PROCESSING_WORKERS = int(os.getenv("MAX_PROCESSING_WORKERS", "4"))
PROCESSING_QUEUE_SIZE = int(os.getenv("PROCESSING_QUEUE_SIZE", "100"))

CORS_ORIGINS = os.getenv("CORS_ORIGINS", "http://localhost:3000,http://localhost:5173").split(",")
