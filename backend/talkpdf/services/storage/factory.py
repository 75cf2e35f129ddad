"""
Storage factory: builds the blob store named by STORAGE_TYPE.

Adapters for remote stores are imported lazily so boto3 and supabase are
only loaded when selected.
"""
from pathlib import Path
from typing import Optional

from .base import FileStorageInterface
from .local_storage import LocalFileStorage
from ...core import config
from ...core.logging_config import get_logger

logger = get_logger(__name__)

SUPPORTED_STORAGE_TYPES = ("local", "s3", "supabase")


class FileStorageFactory:
    @staticmethod
    def create(storage_type: Optional[str] = None, **kwargs) -> FileStorageInterface:
        """
        Create a storage adapter.

        Args:
            storage_type: 'local', 's3' or 'supabase' (defaults to STORAGE_TYPE)
            **kwargs: Overrides for the adapter's configured settings

        Returns:
            FileStorageInterface instance (not yet initialized)
        """
        storage_type = (storage_type or config.STORAGE_TYPE).lower()
        if storage_type not in SUPPORTED_STORAGE_TYPES:
            raise ValueError(
                f"Unsupported storage type: {storage_type}. "
                f"Supported types: {', '.join(repr(t) for t in SUPPORTED_STORAGE_TYPES)}"
            )
        builder = getattr(FileStorageFactory, f"_create_{storage_type}")
        return builder(**kwargs)

    @staticmethod
    def _create_local(**kwargs) -> LocalFileStorage:
        base_dir = kwargs.get("base_dir") or config.LOCAL_STORAGE_DIR or config.BASE_DIR / "storage"
        return LocalFileStorage(base_dir=Path(base_dir))

    @staticmethod
    def _create_s3(**kwargs) -> FileStorageInterface:
        from .s3_storage import S3FileStorage

        bucket_name = kwargs.get("bucket_name", config.S3_BUCKET_NAME)
        if not bucket_name:
            raise ValueError("S3_BUCKET_NAME is required for S3 storage")

        return S3FileStorage(
            bucket_name=bucket_name,
            aws_access_key_id=kwargs.get("aws_access_key_id", config.AWS_ACCESS_KEY_ID),
            aws_secret_access_key=kwargs.get("aws_secret_access_key", config.AWS_SECRET_ACCESS_KEY),
            region_name=kwargs.get("region_name", config.AWS_REGION),
            endpoint_url=kwargs.get("endpoint_url", config.S3_ENDPOINT_URL),
            key_prefix=kwargs.get("key_prefix", config.S3_KEY_PREFIX),
            client=kwargs.get("client")
        )

    @staticmethod
    def _create_supabase(**kwargs) -> FileStorageInterface:
        from .supabase_storage import SupabaseFileStorage

        supabase_url = kwargs.get("supabase_url", config.SUPABASE_URL)
        supabase_key = kwargs.get("supabase_key", config.SUPABASE_KEY)
        if not supabase_url or not supabase_key:
            raise ValueError("SUPABASE_URL and SUPABASE_KEY are required for Supabase storage")

        return SupabaseFileStorage(
            supabase_url=supabase_url,
            supabase_key=supabase_key,
            bucket_name=kwargs.get("bucket_name", config.SUPABASE_STORAGE_BUCKET)
        )

    @staticmethod
    async def create_and_initialize(storage_type: Optional[str] = None, **kwargs) -> FileStorageInterface:
        storage = FileStorageFactory.create(storage_type, **kwargs)
        await storage.initialize()
        logger.info(f"  ✅ {type(storage).__name__} initialized")
        return storage
