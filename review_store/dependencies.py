"""
Dependency wiring for the FastAPI app and the Lambda handler.
"""

from __future__ import annotations

from review_store.config import get_settings
from review_store.documents import DocumentStore
from review_store.ledger import ReviewLedger
from review_store.progress import ProgressTable
from review_store.storage import InMemoryStorageClient, S3StorageClient, StorageClient

_storage_client: StorageClient | None = None
_document_store: DocumentStore | None = None
_review_ledger: ReviewLedger | None = None
_progress_table: ProgressTable | None = None


def get_storage_client() -> StorageClient:
    """
    Return a singleton storage client so in-memory documents persist across requests.
    """
    global _storage_client
    if _storage_client:
        return _storage_client

    settings = get_settings()
    if settings.use_in_memory_backends or not settings.s3_bucket_name:
        _storage_client = InMemoryStorageClient()
    else:
        _storage_client = S3StorageClient(
            bucket=settings.s3_bucket_name,
            region=settings.aws_region,
            endpoint=settings.s3_endpoint_url,
            access_key_id=settings.aws_access_key_id,
            secret_access_key=settings.aws_secret_access_key,
        )
    return _storage_client


def get_document_store() -> DocumentStore:
    global _document_store
    if _document_store:
        return _document_store

    settings = get_settings()
    _document_store = DocumentStore(
        get_storage_client(), write_policy=settings.write_policy
    )
    return _document_store


def get_review_ledger() -> ReviewLedger:
    global _review_ledger
    if _review_ledger:
        return _review_ledger

    settings = get_settings()
    _review_ledger = ReviewLedger(
        get_document_store(), document_key=settings.review_document_key
    )
    return _review_ledger


def get_progress_table() -> ProgressTable:
    global _progress_table
    if _progress_table:
        return _progress_table

    settings = get_settings()
    _progress_table = ProgressTable(
        get_document_store(), document_key=settings.progress_document_key
    )
    return _progress_table


def reset_dependencies() -> None:
    """Forget every cached client (tests and settings reloads)."""
    global _storage_client, _document_store, _review_ledger, _progress_table
    _storage_client = None
    _document_store = None
    _review_ledger = None
    _progress_table = None
