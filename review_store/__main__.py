"""
Run the review store API under uvicorn.
"""

from __future__ import annotations

import argparse
import logging

import uvicorn

from review_store.config import configure_logging, get_settings

logger = logging.getLogger(__name__)


def main() -> int:
    parser = argparse.ArgumentParser(description="Review store API server")
    parser.add_argument("--host", type=str, default="127.0.0.1", help="Bind address")
    parser.add_argument("--port", type=int, default=8000, help="Bind port")
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        help="Override LOG_LEVEL (DEBUG, INFO, WARNING, ...)",
    )
    args = parser.parse_args()

    settings = get_settings()
    level = (args.log_level or settings.log_level).upper()
    configure_logging(level)
    logger.info(
        "Serving bucket %s (write policy: %s)",
        settings.s3_bucket_name if not settings.use_in_memory_backends else "<in-memory>",
        settings.write_policy,
    )
    uvicorn.run(
        "review_store.app:app",
        host=args.host,
        port=args.port,
        log_level=level.lower(),
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
