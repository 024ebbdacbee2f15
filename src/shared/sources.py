"""
File sources the processing pipeline can read NEM12 content from.

Reading the content is the only blocking step of a run, so each source
exposes it as a coroutine; blocking reads are pushed to a worker thread.
"""

import asyncio
from functools import cached_property
from pathlib import Path
from typing import Any, Protocol

import boto3
from aws_lambda_powertools import Logger

from shared.common import DEFAULT_ENCODING

logger = Logger(service="nem12-sql", child=True)

# S3 client (lazy initialization)
_s3_client = None


def get_s3_client() -> Any:
    """Get S3 client with lazy initialization."""
    global _s3_client
    if _s3_client is None:
        _s3_client = boto3.client("s3")
    return _s3_client


class FileSource(Protocol):
    name: str

    @property
    def size(self) -> int: ...

    async def read_text(self) -> str: ...


def decode_content(content: bytes) -> str:
    """Decode file bytes as UTF-8, dropping a leading BOM if present."""
    return content.decode(DEFAULT_ENCODING)


class LocalFileSource:
    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self.name = self.path.name

    @property
    def size(self) -> int:
        return self.path.stat().st_size

    async def read_text(self) -> str:
        logger.debug("Reading local file", extra={"path": str(self.path)})
        content = await asyncio.to_thread(self.path.read_bytes)
        return decode_content(content)


class S3FileSource:
    """
    NEM12 file stored in S3.

    Args:
        bucket: S3 bucket name
        key: Decoded S3 object key
        s3_client: boto3 S3 client (default: shared lazily-created client)
    """

    def __init__(self, bucket: str, key: str, s3_client: Any = None) -> None:
        self.bucket = bucket
        self.key = key
        self.name = Path(key).name
        self._s3_client = s3_client

    @property
    def s3_client(self) -> Any:
        return self._s3_client or get_s3_client()

    @cached_property
    def size(self) -> int:
        response = self.s3_client.head_object(Bucket=self.bucket, Key=self.key)
        return response["ContentLength"]

    async def read_text(self) -> str:
        logger.info("Downloading file", extra={"bucket": self.bucket, "key": self.key})
        content = await asyncio.to_thread(self._get_object_body)
        return decode_content(content)

    def _get_object_body(self) -> bytes:
        response = self.s3_client.get_object(Bucket=self.bucket, Key=self.key)
        return response["Body"].read()


class InMemoryFileSource:
    """Content already held in memory, e.g. an uploaded form file."""

    def __init__(self, name: str, content: bytes | str) -> None:
        self.name = name
        self._content = content.encode("utf-8") if isinstance(content, str) else content

    @property
    def size(self) -> int:
        return len(self._content)

    async def read_text(self) -> str:
        return decode_content(self._content)
