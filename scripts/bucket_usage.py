#!/usr/bin/env python3
"""
CLI utility to report storage usage of tenant buckets.

Usage:
    python scripts/bucket_usage.py                # every discovered bucket
    python scripts/bucket_usage.py --bucket NSG-LMS --path reports
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from app.storage.factory import get_registry, get_resolver, get_usage_service
from app.storage.services.discovery import discover
from lmsadmin_core.runtime import RunContext, ServiceError


async def report(buckets: list[str], path: str) -> list[dict]:
    usage = get_usage_service()
    rows = []
    try:
        for bucket in buckets:
            try:
                result = await usage.measure(bucket, path=path, context=RunContext.new(bucket))
            except ServiceError as e:
                rows.append({"bucket": bucket, "error": e.message_safe})
                continue
            rows.append(
                {
                    "bucket": bucket,
                    "usedBytes": result.used_bytes,
                    "totalBytes": result.total_bytes,
                    "files": result.file_count,
                    "source": result.source.value,
                    "incomplete": not result.complete,
                }
            )
    finally:
        await get_resolver().aclose()
    return rows


def main():
    parser = argparse.ArgumentParser(description="Report bucket storage usage")
    parser.add_argument(
        "--bucket",
        action="append",
        default=None,
        help="Bucket to measure (repeatable; defaults to every configured tenant bucket)",
    )
    parser.add_argument("--path", default="", help="Only measure this folder")
    args = parser.parse_args()

    buckets = args.bucket or [ref.bucket_name for ref in discover(get_registry())]
    result = asyncio.run(report(buckets, args.path))
    print(json.dumps(result, indent=2, default=str))


if __name__ == "__main__":
    main()
