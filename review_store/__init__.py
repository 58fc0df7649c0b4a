"""
Review store service package.

Accepts answer reviews and progress checkpoints over HTTP and keeps them as
two whole JSON documents in an S3-compatible bucket.
"""

__version__ = "0.1.0"
