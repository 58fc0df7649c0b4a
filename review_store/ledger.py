"""
Review ledger: an ordered list of review records, upserted by ``review_id``.
"""

from __future__ import annotations

import logging
from typing import Any

from review_store.documents import DocumentStore
from review_store.records import ReviewRecord

logger = logging.getLogger(__name__)


class ReviewLedger:
    def __init__(self, store: DocumentStore, document_key: str = "review.json"):
        self.store = store
        self.document_key = document_key

    def list_reviews(self) -> tuple[list[dict], int]:
        """Return all stored reviews in insertion order and their count."""
        document = self.store.load(self.document_key, default=[])
        reviews = document.data
        logger.info("Retrieved %d reviews", len(reviews))
        return reviews, len(reviews)

    def upsert_review(self, payload: Any) -> tuple[ReviewRecord, int]:
        """
        Validate ``payload`` and store it, replacing any entry with the same
        ``review_id`` in place. Returns the stored record and the new total.
        """
        # Validation happens before any storage round trip.
        record = ReviewRecord.from_payload(payload)

        document = self.store.load(self.document_key, default=[])
        reviews: list = document.data
        logger.info("Loaded %d existing reviews", len(reviews))

        entry = record.as_dict()
        for index, existing in enumerate(reviews):
            if isinstance(existing, dict) and existing.get("review_id") == record.review_id:
                reviews[index] = entry
                logger.info("Updated existing review: %s", record.review_id)
                break
        else:
            reviews.append(entry)
            logger.info(
                "Added new review: %s. Total count: %d", record.review_id, len(reviews)
            )

        self.store.save(document, metadata={"total-reviews": len(reviews)})
        return record, len(reviews)
