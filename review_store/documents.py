"""
Whole-document JSON store on top of a StorageClient.

Every mutation is a full read-modify-write of one named document. Under the
default ``last_writer_wins`` policy two overlapping cycles on the same
document can lose an update; the ``optimistic`` policy turns that case into a
ConcurrentUpdateError instead.
"""

from __future__ import annotations

import copy
import json
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Optional

from review_store.config import WritePolicy
from review_store.errors import (
    ConcurrentUpdateError,
    ObjectNotFoundError,
    PreconditionFailedError,
    StoreFailure,
)
from review_store.storage import StorageClient

logger = logging.getLogger(__name__)


@dataclass
class LoadedDocument:
    name: str
    data: Any
    # Entity tag of the stored blob, None when the document did not exist
    version: Optional[str] = None

    @property
    def exists(self) -> bool:
        return self.version is not None


def utc_now_iso() -> str:
    """ISO-8601 timestamp with millisecond precision and a ``Z`` suffix."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


class DocumentStore:
    """Loads and saves named JSON documents as single blobs."""

    def __init__(
        self,
        storage: StorageClient,
        write_policy: WritePolicy = "last_writer_wins",
    ):
        self.storage = storage
        self.write_policy = write_policy

    def load(self, name: str, default: Any) -> LoadedDocument:
        """
        Fetch and decode ``name``. A missing blob yields a copy of ``default``.
        """
        try:
            stored = self.storage.get_object(name)
        except ObjectNotFoundError:
            logger.info("%s does not exist yet, using empty document", name)
            return LoadedDocument(name=name, data=copy.deepcopy(default))

        try:
            data = json.loads(stored.body.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise StoreFailure(f"{name} is not valid JSON: {exc}") from exc
        if not isinstance(data, type(default)):
            raise StoreFailure(
                f"{name} holds {type(data).__name__}, expected {type(default).__name__}"
            )
        return LoadedDocument(name=name, data=data, version=stored.etag or "")

    def save(
        self,
        document: LoadedDocument,
        *,
        metadata: Optional[dict] = None,
    ) -> None:
        """
        Overwrite the whole blob with ``document.data``.

        Under the optimistic policy the write only succeeds if the blob is
        still at ``document.version``.
        """
        body = json.dumps(document.data, indent=2, ensure_ascii=False).encode("utf-8")
        object_metadata = {"last-updated": utc_now_iso()}
        for key, value in (metadata or {}).items():
            object_metadata[key] = str(value)

        if_match = None
        if_none_match = None
        if self.write_policy == "optimistic":
            if document.exists and document.version:
                if_match = document.version
            elif not document.exists:
                if_none_match = "*"

        try:
            etag = self.storage.put_object(
                document.name,
                body,
                content_type="application/json",
                metadata=object_metadata,
                if_match=if_match,
                if_none_match=if_none_match,
            )
        except PreconditionFailedError as exc:
            raise ConcurrentUpdateError(
                f"{document.name} was modified by another request; reload and retry"
            ) from exc
        document.version = etag or ""
        logger.info("Successfully updated %s", document.name)
