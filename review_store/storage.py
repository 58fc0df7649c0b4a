"""
Storage abstraction for S3 (or S3-compatible) object storage and in-memory testing.
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass, field
from typing import Optional, Protocol

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from review_store.errors import (
    ObjectNotFoundError,
    PreconditionFailedError,
    StoreFailure,
)

_NOT_FOUND_CODES = {"NoSuchKey", "404", "NotFound"}
_PRECONDITION_CODES = {
    "PreconditionFailed",
    "412",
    "ConditionalRequestConflict",
    "409",
}


@dataclass
class StoredObject:
    body: bytes
    etag: Optional[str] = None
    metadata: dict = field(default_factory=dict)


class StorageClient(Protocol):
    """Defines the operations the document store needs from object storage."""

    def get_object(self, path: str) -> StoredObject:
        ...

    def put_object(
        self,
        path: str,
        body: bytes,
        *,
        content_type: str = "application/json",
        metadata: Optional[dict] = None,
        if_match: Optional[str] = None,
        if_none_match: Optional[str] = None,
    ) -> Optional[str]:
        ...


@dataclass
class InMemoryStorageClient:
    """Test double for storage interactions."""

    stored_objects: dict = None

    def __post_init__(self):
        if self.stored_objects is None:
            self.stored_objects = {}

    def get_object(self, path: str) -> StoredObject:
        stored = self.stored_objects.get(path)
        if stored is None:
            raise ObjectNotFoundError(path)
        return stored

    def put_object(
        self,
        path: str,
        body: bytes,
        *,
        content_type: str = "application/json",
        metadata: Optional[dict] = None,
        if_match: Optional[str] = None,
        if_none_match: Optional[str] = None,
    ) -> Optional[str]:
        current = self.stored_objects.get(path)
        if if_none_match == "*" and current is not None:
            raise PreconditionFailedError(path)
        if if_match is not None and (current is None or current.etag != if_match):
            raise PreconditionFailedError(path)
        # Quoted MD5, the same shape S3 returns for single-part uploads
        etag = f'"{hashlib.md5(body).hexdigest()}"'
        self.stored_objects[path] = StoredObject(
            body=bytes(body), etag=etag, metadata=dict(metadata or {})
        )
        return etag

    def reset(self) -> None:
        """Drop every stored object (useful in tests)."""
        self.stored_objects.clear()


@dataclass
class S3StorageClient:
    """
    boto3-backed client for AWS S3 or any S3-compatible endpoint.
    """

    bucket: str
    region: str
    endpoint: Optional[str] = None
    access_key_id: Optional[str] = None
    secret_access_key: Optional[str] = None
    client: object = None

    def __post_init__(self):
        if self.client is not None:
            self._client = self.client
            return
        config = Config(signature_version="s3v4", retries={"mode": "standard"})
        self._client = boto3.client(
            "s3",
            endpoint_url=self.endpoint or None,
            region_name=self.region or None,
            aws_access_key_id=self.access_key_id or None,
            aws_secret_access_key=self.secret_access_key or None,
            config=config,
        )

    def get_object(self, path: str) -> StoredObject:
        try:
            response = self._client.get_object(Bucket=self.bucket, Key=path)
            body = response["Body"].read()
        except ClientError as exc:
            code = exc.response.get("Error", {}).get("Code", "")
            if code in _NOT_FOUND_CODES:
                raise ObjectNotFoundError(path) from exc
            raise StoreFailure(_client_error_message(exc)) from exc
        except BotoCoreError as exc:
            raise StoreFailure(str(exc)) from exc
        return StoredObject(
            body=body,
            etag=response.get("ETag"),
            metadata=response.get("Metadata") or {},
        )

    def put_object(
        self,
        path: str,
        body: bytes,
        *,
        content_type: str = "application/json",
        metadata: Optional[dict] = None,
        if_match: Optional[str] = None,
        if_none_match: Optional[str] = None,
    ) -> Optional[str]:
        params = {
            "Bucket": self.bucket,
            "Key": path,
            "Body": body,
            "ContentType": content_type,
            "Metadata": dict(metadata or {}),
        }
        if if_match is not None:
            params["IfMatch"] = if_match
        if if_none_match is not None:
            params["IfNoneMatch"] = if_none_match
        try:
            response = self._client.put_object(**params)
        except ClientError as exc:
            code = exc.response.get("Error", {}).get("Code", "")
            if code in _PRECONDITION_CODES:
                raise PreconditionFailedError(path) from exc
            raise StoreFailure(_client_error_message(exc)) from exc
        except BotoCoreError as exc:
            raise StoreFailure(str(exc)) from exc
        return response.get("ETag")


def _client_error_message(exc: ClientError) -> str:
    error = exc.response.get("Error", {})
    return error.get("Message") or error.get("Code") or str(exc)
