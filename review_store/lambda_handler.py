"""
AWS Lambda entry point for API Gateway proxy events (REST v1 and HTTP v2).

Routes:
    OPTIONS  any path             CORS preflight
    GET      .../progress         get progress (?reviewer=&category=)
    PUT/POST .../progress         save progress
    GET      any other path       list reviews
    POST     any other path       submit or update a review
"""

from __future__ import annotations

import base64
import binascii
import json
import logging
from typing import Any, Dict, Optional

from review_store.config import (
    CORS_ALLOW_HEADERS,
    CORS_ALLOW_METHODS,
    configure_logging,
    get_settings,
)
from review_store.dependencies import get_progress_table, get_review_ledger
from review_store.errors import ReviewStoreError, StoreFailure
from review_store.records import parse_payload

logger = logging.getLogger(__name__)

DEFAULT_PATH = "/review"


def _allowed_origin(event: Dict) -> str:
    origins = get_settings().cors_allow_origins
    if not origins or "*" in origins:
        return "*"
    headers = {k.lower(): v for k, v in (event.get("headers") or {}).items()}
    origin = headers.get("origin")
    return origin if origin in origins else origins[0]


def _cors_headers(event: Dict) -> Dict[str, str]:
    return {
        "Access-Control-Allow-Origin": _allowed_origin(event),
        "Access-Control-Allow-Headers": ",".join(CORS_ALLOW_HEADERS),
        "Access-Control-Allow-Methods": ",".join(CORS_ALLOW_METHODS),
        "Content-Type": "application/json",
    }


def _response(event: Dict, status_code: int, body: Any) -> Dict:
    return {
        "statusCode": status_code,
        "headers": _cors_headers(event),
        "body": json.dumps(body, ensure_ascii=False),
    }


def _parse_request(event: Dict) -> tuple[Optional[str], str]:
    http_context = (event.get("requestContext") or {}).get("http") or {}
    method = event.get("httpMethod") or http_context.get("method")
    path = (
        http_context.get("path")
        or event.get("path")
        or event.get("rawPath")
        or DEFAULT_PATH
    )
    return (method.upper() if method else None), path


def _event_body(event: Dict) -> dict:
    body = event.get("body")
    if isinstance(body, str) and event.get("isBase64Encoded"):
        try:
            body = base64.b64decode(body, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise StoreFailure(f"Request body is not valid base64: {exc}") from exc
    return parse_payload(body)


def _handle_list_reviews(event: Dict) -> tuple[int, dict]:
    reviews, total = get_review_ledger().list_reviews()
    return 200, {"success": True, "reviews": reviews, "total": total}


def _handle_submit_review(event: Dict) -> tuple[int, dict]:
    record, total = get_review_ledger().upsert_review(_event_body(event))
    return 200, {
        "success": True,
        "message": "Review saved successfully",
        "review_id": record.review_id,
        "total_reviews": total,
    }


def _handle_get_progress(event: Dict) -> tuple[int, dict]:
    params = event.get("queryStringParameters") or {}
    progress = get_progress_table().get_progress(
        params.get("reviewer"), params.get("category")
    )
    return 200, {
        "success": True,
        "progress": progress.as_dict() if progress else None,
    }


def _handle_save_progress(event: Dict) -> tuple[int, dict]:
    payload = _event_body(event)
    get_progress_table().save_progress(
        payload.get("reviewerName"),
        payload.get("category"),
        payload.get("questionIndex"),
    )
    return 200, {"success": True, "message": "Progress saved successfully"}


def _route(method: Optional[str], path: str):
    if "/progress" in path:
        if method == "GET":
            return _handle_get_progress
        if method in ("PUT", "POST"):
            return _handle_save_progress
    if method == "GET":
        return _handle_list_reviews
    if method == "POST":
        return _handle_submit_review
    return None


def lambda_handler(event: Dict, context: Any) -> Dict:
    method, path = _parse_request(event)

    # CORS preflight
    if method == "OPTIONS":
        return _response(event, 200, {"message": "CORS preflight successful"})

    logger.info("Processing %s %s", method, path)
    handler = _route(method, path)
    if handler is None:
        return _response(event, 404, {"error": "Not found"})

    try:
        status_code, body = handler(event)
    except ReviewStoreError as exc:
        if exc.status_code >= 500:
            logger.exception("Error processing %s %s: %s", method, path, exc.message)
        return _response(event, exc.status_code, exc.as_body())
    except Exception as exc:
        logger.exception("Unhandled error processing %s %s", method, path)
        return _response(
            event, 500, {"error": "Internal server error", "message": str(exc)}
        )
    return _response(event, status_code, body)


configure_logging()
