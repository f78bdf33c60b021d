#!/usr/bin/env python
"""Bulk-issue certificates from a CSV / XLSX file through the admin API.

Validates the file on the server, then generates the valid rows a few at a
time so progress is visible and one slow render never holds a huge request.
Rows that fail are listed at the end; fix them and run again with only
those rows.

Usage:
  python scripts/import_certificates.py EVENT_ID attendees.csv [--url URL] [--admin-key KEY]
"""
import argparse
import asyncio
import os
import sys
from getpass import getpass
from pathlib import Path

import httpx

# Ensure project root is on sys.path so `app` package can be imported
sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from app.config import settings
from app.services.batch_driver import BatchProgress, run_chunked_generation


def _error_detail(resp: httpx.Response) -> str:
    try:
        return str(resp.json().get("detail", resp.text))
    except ValueError:
        return resp.text


async def login(client: httpx.AsyncClient, admin_key: str) -> str:
    resp = await client.post("/api/admin/login", json={"adminKey": admin_key})
    if resp.status_code != 200:
        raise SystemExit(f"Login failed: {_error_detail(resp)}")
    return resp.json()["access_token"]


async def validate_file(client: httpx.AsyncClient, path: Path) -> dict:
    resp = await client.post(
        "/api/admin/certificates/import",
        files={"file": (path.name, path.read_bytes())},
    )
    if resp.status_code != 200:
        raise SystemExit(f"Import failed: {_error_detail(resp)}")
    return resp.json()


def print_progress(progress: BatchProgress):
    print(
        f"  chunk {progress.current_chunk}/{progress.total_chunks}: "
        f"{progress.generated} generated, {progress.failed} failed"
    )


async def run(args) -> int:
    path = Path(args.file)
    if not path.is_file():
        print(f"File not found: {path}")
        return 1

    async with httpx.AsyncClient(base_url=args.url, timeout=args.timeout) as client:
        token = await login(client, args.admin_key)
        client.headers["Authorization"] = f"Bearer {token}"

        preview = await validate_file(client, path)
        print(f"{preview['total']} rows: {preview['valid']} valid, {preview['invalid']} invalid")
        for row in preview["rows"]:
            if not row["isValid"]:
                print(f"  row {row['index']}: {'; '.join(row['errors'])}")

        selected = [{"data": row["data"], "isValid": True} for row in preview["rows"] if row["isValid"]]
        if not selected:
            print("Nothing to generate")
            return 1

        async def send_chunk(event_id: str, chunk: list) -> dict:
            resp = await client.post(
                "/api/admin/certificates/generate",
                json={"eventId": event_id, "rows": chunk},
            )
            resp.raise_for_status()
            return resp.json()

        print(f"Generating {len(selected)} certificates in chunks of {args.chunk_size}")
        try:
            progress = await run_chunked_generation(
                args.event_id, selected, send_chunk,
                chunk_size=args.chunk_size, on_progress=print_progress,
            )
        except httpx.HTTPStatusError as e:
            print(f"Generation stopped: {_error_detail(e.response)}")
            return 1

    if progress.succeeded:
        print(f"Done: {progress.generated} certificates generated")
    if progress.has_failures:
        print(f"{progress.failed} rows failed and were not generated:")
        for error in progress.errors:
            print(f"  {error}")
        return 2
    return 0 if progress.succeeded else 1


def main():
    parser = argparse.ArgumentParser(description="Bulk-issue certificates for an event")
    parser.add_argument("event_id", help="Target event id")
    parser.add_argument("file", help="CSV or XLSX file (header row first)")
    parser.add_argument("--url", default=settings.APP_URL, help="Server base URL")
    parser.add_argument("--admin-key", default=os.getenv("ADMIN_KEY"), help="Admin key (or ADMIN_KEY env var)")
    parser.add_argument("--chunk-size", type=int, default=settings.CLIENT_CHUNK_SIZE)
    parser.add_argument("--timeout", type=float, default=300.0, help="Seconds per request")
    args = parser.parse_args()

    if not args.admin_key:
        args.admin_key = getpass("Admin key: ")

    sys.exit(asyncio.run(run(args)))


if __name__ == "__main__":
    main()
