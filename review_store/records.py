"""
Record types persisted in the review and progress documents.
"""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from typing import Any, NamedTuple, Optional

from review_store.errors import StoreFailure, ValidationError

PROGRESS_KEY_SEPARATOR = "__"

REQUIRED_REVIEW_FIELDS = (
    "review_id",
    "question_id",
    "question_set",
    "question_index",
    "category",
    "question_text",
    "reviewer_name",
    "answer",
    "correct_answer",
    "is_correct",
    "timestamp",
)


@dataclass
class ReviewRecord:
    """One submitted answer, keyed by ``review_id``."""

    review_id: str
    question_id: Any
    question_set: Any
    question_index: int
    category: str
    question_text: str
    reviewer_name: str
    answer: Any
    correct_answer: Any
    is_correct: bool
    timestamp: str
    keyword: str = ""
    comment: str = ""

    @classmethod
    def from_payload(cls, payload: Any) -> "ReviewRecord":
        """
        Build a record from a submitted payload.

        Only absence is checked: a field that is present with a null or falsy
        value is accepted as-is. ``keyword`` and ``comment`` fall back to "".
        """
        if not isinstance(payload, dict):
            raise StoreFailure("Request body must be a JSON object")
        for name in REQUIRED_REVIEW_FIELDS:
            if name not in payload:
                raise ValidationError(f"Missing required field: {name}", field=name)
        values = {name: payload[name] for name in REQUIRED_REVIEW_FIELDS}
        return cls(
            **values,
            keyword=payload.get("keyword") or "",
            comment=payload.get("comment") or "",
        )

    def as_dict(self) -> dict:
        # Field order of the stored document
        return {
            "review_id": self.review_id,
            "question_id": self.question_id,
            "question_set": self.question_set,
            "question_index": self.question_index,
            "keyword": self.keyword,
            "category": self.category,
            "question_text": self.question_text,
            "reviewer_name": self.reviewer_name,
            "answer": self.answer,
            "correct_answer": self.correct_answer,
            "is_correct": self.is_correct,
            "timestamp": self.timestamp,
            "comment": self.comment,
        }


class ProgressKey(NamedTuple):
    reviewer_name: str
    category: str

    @classmethod
    def build(cls, reviewer_name: Optional[str], category: Optional[str]) -> "ProgressKey":
        for label, value in (("reviewerName", reviewer_name), ("category", category)):
            if not value:
                raise ValidationError(f"Missing required field: {label}", field=label)
            if not isinstance(value, str):
                raise ValidationError(f"{label} must be a string", field=label)
            if PROGRESS_KEY_SEPARATOR in value:
                raise ValidationError(
                    f"{label} must not contain '{PROGRESS_KEY_SEPARATOR}'",
                    field=label,
                )
        return cls(reviewer_name, category)

    def encode(self) -> str:
        return f"{self.reviewer_name}{PROGRESS_KEY_SEPARATOR}{self.category}"


@dataclass
class ProgressRecord:
    reviewerName: str
    category: str
    questionIndex: int
    timestamp: str

    @property
    def key(self) -> ProgressKey:
        return ProgressKey(self.reviewerName, self.category)

    @classmethod
    def from_dict(cls, data: dict) -> "ProgressRecord":
        return cls(
            reviewerName=data["reviewerName"],
            category=data["category"],
            questionIndex=data["questionIndex"],
            timestamp=data["timestamp"],
        )

    def as_dict(self) -> dict:
        return asdict(self)


def parse_payload(raw: Any) -> dict:
    """
    Decode a request body (bytes, str or an already-decoded object) into a dict.

    Anything that is not a JSON object is reported as a StoreFailure, the same
    class as other internal errors.
    """
    if isinstance(raw, (bytes, bytearray)):
        try:
            raw = raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise StoreFailure(f"Request body is not UTF-8: {exc}") from exc
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise StoreFailure(f"Request body is not valid JSON: {exc}") from exc
    if not isinstance(raw, dict):
        raise StoreFailure("Request body must be a JSON object")
    return raw
