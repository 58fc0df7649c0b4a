"""
Progress table: the latest question index per (reviewer, category).
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from review_store.documents import DocumentStore, utc_now_iso
from review_store.errors import StoreFailure, ValidationError
from review_store.records import ProgressKey, ProgressRecord

logger = logging.getLogger(__name__)


class ProgressTable:
    """
    Entries live in one JSON object keyed by ``"<reviewer>__<category>"``.
    Only the entry for the requested key is ever decoded or replaced; every
    other entry is carried through a save untouched.
    """

    def __init__(self, store: DocumentStore, document_key: str = "progress.json"):
        self.store = store
        self.document_key = document_key

    def get_progress(
        self, reviewer_name: Optional[str], category: Optional[str]
    ) -> Optional[ProgressRecord]:
        """Return the stored progress for the pair, or None if nothing is saved yet."""
        key = ProgressKey.build(reviewer_name, category)
        document = self.store.load(self.document_key, default={})
        entry = document.data.get(key.encode())
        if entry is None:
            logger.info("No progress stored for %s", key.encode())
            return None
        try:
            progress = ProgressRecord.from_dict(entry)
        except (KeyError, TypeError) as exc:
            raise StoreFailure(
                f"Malformed progress entry {key.encode()!r} in {self.document_key}"
            ) from exc
        logger.info("Retrieved progress for %s: %s", key.encode(), progress)
        return progress

    def save_progress(
        self,
        reviewer_name: Optional[str],
        category: Optional[str],
        question_index: Any,
    ) -> ProgressRecord:
        """Replace the progress for the pair. No merge with the previous value."""
        key = ProgressKey.build(reviewer_name, category)
        if question_index is None:
            raise ValidationError(
                "Missing required field: questionIndex", field="questionIndex"
            )

        document = self.store.load(self.document_key, default={})
        record = ProgressRecord(
            reviewerName=key.reviewer_name,
            category=key.category,
            questionIndex=question_index,
            timestamp=utc_now_iso(),
        )
        document.data[key.encode()] = record.as_dict()
        logger.info("Updating progress for %s: %s", key.encode(), record)

        self.store.save(document)
        return record
