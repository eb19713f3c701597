"""Seed the notes service with a handful of sample notes.

Creates notes through the HTTP API so they go through the same validation
and storage path as real clients. Requires the API to be running.

Usage:
    python scripts/seed_data.py [--base-url http://localhost:8000]
"""

from __future__ import annotations

import argparse
import sys

import requests

DEFAULT_BASE_URL = "http://localhost:8000"
TIMEOUT = 10


# Each entry: (title, content, tags)
NOTES: list[tuple[str, str, list[str]]] = [
    (
        "React Hook rules",
        "Only call hooks at the top level, never inside loops or conditions.",
        ["react", "hooks", "frontend"],
    ),
    (
        "Meeting Notes",
        "Discussed moving note storage off the JSON file once we need "
        "concurrent writers. Decision: not before the MVP ships.",
        ["meetings", "architecture"],
    ),
    (
        "Reading List",
        "Designing Data-Intensive Applications, chapter 7 on transactions.",
        ["reading"],
    ),
    (
        "Grocery list",
        "Eggs, milk, bread",
        [],
    ),
    (
        "Empty body",
        "",
        ["scratch"],
    ),
]


def check_health(base_url: str) -> bool:
    """Verify the API is reachable and its storage readable."""
    try:
        resp = requests.get(f"{base_url}/health", timeout=TIMEOUT)
        data = resp.json()
        return data.get("status") == "healthy"
    except (requests.RequestException, ValueError) as e:
        print(f"  Health check failed: {e}")
        return False


def create_note(base_url: str, title: str, content: str, tags: list[str]) -> dict:
    """POST /notes and return the created note."""
    resp = requests.post(
        f"{base_url}/notes",
        json={"title": title, "content": content, "tags": tags},
        timeout=TIMEOUT,
    )
    resp.raise_for_status()
    return resp.json()


def main() -> None:
    """Create every sample note in order."""
    parser = argparse.ArgumentParser(description="Seed sample notes")
    parser.add_argument(
        "--base-url",
        default=DEFAULT_BASE_URL,
        help=f"Notes API base URL (default: {DEFAULT_BASE_URL})",
    )
    args = parser.parse_args()
    base_url = args.base_url.rstrip("/")

    print(f"\n  Seeding notes via {base_url}")

    if not check_health(base_url):
        print("  FAIL: API is not healthy. Is it running?")
        sys.exit(1)
    print("  OK: API is healthy.\n")

    failures = 0
    for i, (title, content, tags) in enumerate(NOTES, 1):
        try:
            note = create_note(base_url, title, content, tags)
            print(f"  [{i}/{len(NOTES)}] {note['id']}  {title}")
        except requests.RequestException as e:
            failures += 1
            print(f"  [{i}/{len(NOTES)}] ERROR {title}: {e}")

    print(f"\n  Done: {len(NOTES) - failures} created, {failures} failed.\n")
    if failures:
        sys.exit(1)


if __name__ == "__main__":
    main()
