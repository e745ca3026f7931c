#!/usr/bin/env python3
"""
Poll a running clock service for its time.

Usage:
    python -m clockdemo.poll [BASE_URL]

BASE_URL defaults to $CLOCKDEMO_URL or http://localhost:8080. When the
service can't be reached the local time is printed instead, formatted the
same way.
"""

import os
import sys

import requests

from clockdemo.clock import TimeFormatter

DEFAULT_URL = "http://localhost:8080"


def get_current_time(base_url, formatter=None, timeout=5):
    """Return (timestamp, source) where source is "remote" or "local"."""
    try:
        resp = requests.get(f"{base_url.rstrip('/')}/time", timeout=timeout)
        resp.raise_for_status()
        return resp.json(), "remote"
    except (requests.RequestException, ValueError) as e:
        print(f"Warning: could not poll {base_url}: {e}", file=sys.stderr)
        formatter = formatter or TimeFormatter(os.getenv("CLOCKDEMO_TIMEZONE") or None)
        return formatter.now(), "local"


def main(argv=None):
    argv = sys.argv[1:] if argv is None else argv
    base_url = argv[0] if argv else os.getenv("CLOCKDEMO_URL", DEFAULT_URL)
    now_str, source = get_current_time(base_url)
    print(f"[{now_str}] - [POLL:{source}] {base_url}")
    return 0 if source == "remote" else 1


if __name__ == "__main__":
    sys.exit(main())
