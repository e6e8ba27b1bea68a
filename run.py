#!/usr/bin/env python3
"""
S3 Performance and Data Integrity Benchmark

Run this script to time the basic operations of an S3-compatible (or Swift)
storage service and check the transferred data.

Usage:
    python run.py -n 5 -s 1048576        # 5 files of 1 MB with s3cmd
    python run.py -n 5 -s 1048576 -p     # upload/download in parallel
    python run.py -n 5 -s 1048576 -m minio -o   # MinIO client, append CSV
    python run.py -n 5 -s 1048576 -a     # Swift API
    python run.py -n 5 -s 1048576 -k     # keep the local files
"""

import sys
from s3perf.cli import main

if __name__ == "__main__":
    sys.exit(main())
