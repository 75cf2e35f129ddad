"""
Auth Service - resolves a bearer token to a user id.

SupabaseAuthService validates JWTs against the Supabase auth API.
StaticTokenAuthService maps fixed tokens to users for local runs and tests.
"""
import asyncio
from abc import ABC, abstractmethod
from typing import Dict, Optional

from ..core import config
from ..core.logging_config import get_logger

logger = get_logger(__name__)


class AuthService(ABC):
    """Identity provider interface."""

    @abstractmethod
    async def get_user_id(self, token: str) -> Optional[str]:
        """
        Resolve a bearer token.

        Returns:
            User id, or None when the token is invalid
        """
        pass


class SupabaseAuthService(AuthService):
    def __init__(self, supabase_url: Optional[str] = None, supabase_key: Optional[str] = None, client=None):
        if client is None:
            from supabase import create_client

            supabase_url = supabase_url or config.SUPABASE_URL
            supabase_key = supabase_key or config.SUPABASE_KEY
            if not supabase_url or not supabase_key:
                raise ValueError("SUPABASE_URL and SUPABASE_KEY must be set for Supabase auth")
            client = create_client(supabase_url, supabase_key)
        self.supabase = client

    async def get_user_id(self, token: str) -> Optional[str]:
        loop = asyncio.get_running_loop()
        try:
            response = await loop.run_in_executor(None, lambda: self.supabase.auth.get_user(token))
        except Exception as e:
            # supabase raises AuthApiError for expired/forged tokens
            logger.info(f"Token rejected by Supabase auth: {type(e).__name__}")
            return None

        user = getattr(response, "user", None)
        return getattr(user, "id", None)


def parse_static_tokens(raw: str) -> Dict[str, str]:
    """Parse "token:user_id,token2:user_id2" into a token map."""
    tokens: Dict[str, str] = {}
    for entry in (raw or "").split(","):
        token, sep, user_id = entry.strip().partition(":")
        if sep and token and user_id:
            tokens[token] = user_id
    return tokens


class StaticTokenAuthService(AuthService):
    def __init__(self, tokens: Optional[Dict[str, str]] = None):
        self.tokens = tokens if tokens is not None else parse_static_tokens(config.STATIC_AUTH_TOKENS)
        if not self.tokens:
            logger.warning("⚠️  Static auth enabled with no tokens; every request will be rejected")

    async def get_user_id(self, token: str) -> Optional[str]:
        return self.tokens.get(token)


def create_auth_service(provider: Optional[str] = None) -> AuthService:
    provider = (provider or config.AUTH_PROVIDER).lower()
    if provider == "supabase":
        return SupabaseAuthService()
    if provider == "static":
        return StaticTokenAuthService()
    raise ValueError(f"Unsupported AUTH_PROVIDER: {provider}. Supported: 'supabase', 'static'")
