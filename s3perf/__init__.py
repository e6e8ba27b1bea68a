"""
s3perf: performance and data integrity benchmark for S3-compatible storage.

Times bucket creation, object upload, listing, download, object deletion
and bucket deletion through the s3cmd, MinIO (mc) or Swift command line
clients, and validates the downloaded data against MD5 checksums.
"""

__version__ = "2.1.0"

from s3perf.cli import main

__all__ = ["main", "__version__"]
