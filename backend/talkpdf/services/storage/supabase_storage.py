"""
Supabase Storage adapter.

Paths are bucket-relative keys such as "<user_id>/<document_id>/audio.mp3".
The storage client is synchronous, so every call runs in the default executor.
"""
import asyncio
from typing import Any, Callable, Optional

from supabase import Client, create_client
from supabase.lib.client_options import ClientOptions

from .base import FileStorageInterface
from ...core.logging_config import get_logger

logger = get_logger(__name__)


def _is_missing(error: Exception) -> bool:
    message = str(error).lower()
    return "not found" in message or "404" in message


class SupabaseFileStorage(FileStorageInterface):
    def __init__(self, supabase_url: str, supabase_key: str, bucket_name: str, client: Optional[Client] = None):
        """
        Args:
            supabase_url: Project URL
            supabase_key: Service role key (or anon key with matching RLS policies)
            bucket_name: Bucket holding source documents and narration audio
            client: Pre-built client (tests)
        """
        self.bucket_name = bucket_name
        self.supabase: Client = client or create_client(
            supabase_url,
            supabase_key,
            options=ClientOptions(auto_refresh_token=False, persist_session=False)
        )

    async def _run(self, fn: Callable[[], Any]) -> Any:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, fn)

    def _bucket(self):
        return self.supabase.storage.from_(self.bucket_name)

    async def initialize(self):
        try:
            buckets = await self._run(self.supabase.storage.list_buckets)
        except Exception as e:
            raise ValueError(f"Error accessing Supabase Storage: {e}") from e

        names = [bucket.name for bucket in buckets]
        if self.bucket_name not in names:
            raise ValueError(f"Supabase Storage bucket '{self.bucket_name}' does not exist (found: {names})")
        logger.info(f"  ✅ Supabase bucket '{self.bucket_name}' reachable")

    async def close(self):
        pass

    async def get_file(self, file_path: str) -> bytes:
        def _download() -> bytes:
            try:
                return self._bucket().download(file_path)
            except Exception as e:
                if _is_missing(e):
                    raise FileNotFoundError(f"File not found in Supabase Storage: {file_path}") from e
                raise

        return await self._run(_download)

    async def save_bytes(self, content: bytes, file_path: str, content_type: str) -> str:
        # storage3 expects the upsert flag as a header string
        await self._run(lambda: self._bucket().upload(
            path=file_path,
            file=content,
            file_options={"content-type": content_type, "upsert": "true"}
        ))
        return file_path
