"""
HTTP routes for the review store API.
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request

from review_store.dependencies import get_progress_table, get_review_ledger
from review_store.ledger import ReviewLedger
from review_store.progress import ProgressTable
from review_store.records import parse_payload
from review_store.schemas import (
    GetProgressResponse,
    HealthResponse,
    ListReviewsResponse,
    ProgressItem,
    SaveProgressResponse,
    SaveReviewResponse,
)

router = APIRouter()


async def json_body(request: Request) -> dict:
    """Read the raw body so malformed JSON maps to our own error types."""
    return parse_payload(await request.body())


@router.get("/health", response_model=HealthResponse)
def health():
    return HealthResponse()


@router.get("/review", response_model=ListReviewsResponse)
def list_reviews(ledger: ReviewLedger = Depends(get_review_ledger)):
    reviews, total = ledger.list_reviews()
    return ListReviewsResponse(reviews=reviews, total=total)


@router.post("/review", response_model=SaveReviewResponse)
def submit_review(
    payload: dict = Depends(json_body),
    ledger: ReviewLedger = Depends(get_review_ledger),
):
    """
    Insert a review, or replace the stored one with the same review_id.
    """
    record, total = ledger.upsert_review(payload)
    return SaveReviewResponse(review_id=record.review_id, total_reviews=total)


@router.get("/progress", response_model=GetProgressResponse)
def get_progress(
    reviewer: Optional[str] = Query(None),
    category: Optional[str] = Query(None),
    table: ProgressTable = Depends(get_progress_table),
):
    progress = table.get_progress(reviewer, category)
    if progress is None:
        return GetProgressResponse(progress=None)
    return GetProgressResponse(progress=ProgressItem(**progress.as_dict()))


@router.api_route(
    "/progress", methods=["PUT", "POST"], response_model=SaveProgressResponse
)
def save_progress(
    payload: dict = Depends(json_body),
    table: ProgressTable = Depends(get_progress_table),
):
    table.save_progress(
        payload.get("reviewerName"),
        payload.get("category"),
        payload.get("questionIndex"),
    )
    return SaveProgressResponse()


@router.options("/{path:path}")
def preflight(path: str):
    # Browser preflights are answered by CORSMiddleware before reaching here.
    return {"message": "CORS preflight successful"}
