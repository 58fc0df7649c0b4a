"""
Pydantic response schemas for the review store API.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel


class ListReviewsResponse(BaseModel):
    success: bool = True
    reviews: list[dict]
    total: int


class SaveReviewResponse(BaseModel):
    success: bool = True
    message: str = "Review saved successfully"
    review_id: Any
    total_reviews: int


class ProgressItem(BaseModel):
    reviewerName: str
    category: str
    questionIndex: Any
    timestamp: str


class GetProgressResponse(BaseModel):
    success: bool = True
    progress: Optional[ProgressItem] = None


class SaveProgressResponse(BaseModel):
    success: bool = True
    message: str = "Progress saved successfully"


class HealthResponse(BaseModel):
    status: str = "ok"
