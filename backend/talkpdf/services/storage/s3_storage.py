"""
S3 storage adapter (AWS or any S3-compatible endpoint such as MinIO).

Storage paths are used as object keys, optionally under a key prefix, so a
document's audio lands at "<prefix>/<user_id>/<document_id>/audio.mp3".
"""
import asyncio
from typing import Any, Callable, Optional

import boto3
from botocore.config import Config
from botocore.exceptions import ClientError

from .base import FileStorageInterface
from ...core.logging_config import get_logger

logger = get_logger(__name__)

MISSING_OBJECT_CODES = {"404", "NoSuchKey", "NotFound"}


def _error_code(error: ClientError) -> str:
    return str(error.response.get("Error", {}).get("Code", ""))


class S3FileStorage(FileStorageInterface):
    def __init__(
        self,
        bucket_name: str,
        aws_access_key_id: Optional[str] = None,
        aws_secret_access_key: Optional[str] = None,
        region_name: str = "us-east-1",
        endpoint_url: Optional[str] = None,
        key_prefix: str = "",
        client=None
    ):
        """
        Args:
            bucket_name: Target bucket
            aws_access_key_id: Access key (omit to use the instance role)
            aws_secret_access_key: Secret key (omit to use the instance role)
            region_name: Bucket region
            endpoint_url: Custom endpoint for S3-compatible services
            key_prefix: Optional prefix prepended to every object key
            client: Pre-built boto3 S3 client (tests)
        """
        self.bucket_name = bucket_name
        self.key_prefix = key_prefix.strip("/")
        self.s3_client = client or boto3.client(
            "s3",
            aws_access_key_id=aws_access_key_id,
            aws_secret_access_key=aws_secret_access_key,
            region_name=region_name,
            endpoint_url=endpoint_url,
            config=Config(signature_version="s3v4", retries={"max_attempts": 3})
        )

    def _key(self, file_path: str) -> str:
        key = file_path.lstrip("/")
        return f"{self.key_prefix}/{key}" if self.key_prefix else key

    async def _run(self, fn: Callable[[], Any]) -> Any:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, fn)

    async def initialize(self):
        try:
            await self._run(lambda: self.s3_client.head_bucket(Bucket=self.bucket_name))
        except ClientError as e:
            code = _error_code(e)
            if code in MISSING_OBJECT_CODES:
                raise ValueError(f"S3 bucket '{self.bucket_name}' does not exist") from e
            if code == "403":
                raise ValueError(f"Access denied to S3 bucket '{self.bucket_name}'") from e
            raise ValueError(f"Error accessing S3 bucket '{self.bucket_name}': {code}") from e
        logger.info(f"  ✅ S3 bucket '{self.bucket_name}' reachable")

    async def close(self):
        pass

    async def get_file(self, file_path: str) -> bytes:
        def _download() -> bytes:
            try:
                response = self.s3_client.get_object(Bucket=self.bucket_name, Key=self._key(file_path))
            except ClientError as e:
                if _error_code(e) in MISSING_OBJECT_CODES:
                    raise FileNotFoundError(f"File not found in S3: {file_path}") from e
                raise
            return response["Body"].read()

        return await self._run(_download)

    async def save_bytes(self, content: bytes, file_path: str, content_type: str) -> str:
        # put_object replaces any existing object under the key
        await self._run(lambda: self.s3_client.put_object(
            Bucket=self.bucket_name,
            Key=self._key(file_path),
            Body=content,
            ContentType=content_type
        ))
        return file_path
