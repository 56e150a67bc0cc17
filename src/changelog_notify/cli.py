# -*- coding: utf-8 -*-
"""
changelog-notify CLI
When the changelog changes, post its latest Timeline entry to Slack
(internal and community webhooks).

Intended to run in CI on pushes that touch the changelog.

Usage (from the docs repo root):
  changelog-notify
  changelog-notify --force     # post even if nothing changed

Flow:
  1. Read the changelog (missing file -> exit 1).
  2. Ask the configured detector (hash file or git diff) whether it changed;
     if not, and --force is not set, exit 0.
  3. Extract the latest entry, format it for Slack, POST to every webhook.
  4. Record the new state (hash detector only) and exit 0.
Any error exits 1.
"""

from __future__ import annotations

import argparse
import sys
from typing import List, Optional

from .config import NotifyConfig, load_config
from .detect import build_detector
from .errors import ExtractionError, NotifyError
from .extract import extract_latest_section
from .slack import build_slack_payload, deliver

PROG = "changelog-notify"


def run(config: NotifyConfig, force: bool = False) -> int:
    path = config.changelog_path
    if not path.exists():
        raise NotifyError(f"{path.name} not found at {path}")

    content = path.read_text(encoding="utf-8")
    detector = build_detector(config)

    if not force and not detector.has_changed(content):
        print(f"Changelog unchanged ({config.detector} detector). Nothing to post.", flush=True)
        return 0

    destinations = config.require_destinations()

    latest = extract_latest_section(content, marker=config.timeline_marker, level=config.heading_level)
    if not latest:
        raise ExtractionError("Could not extract latest changelog section.")

    payload = build_slack_payload(latest, level=config.heading_level)
    deliver(destinations, payload, timeout=config.timeout)

    detector.record(content)
    if config.detector == "hash":
        print("Posted latest changelog to Slack and updated stored hash.", flush=True)
    else:
        print("Posted latest changelog to Slack.", flush=True)
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog=PROG,
        description="Post the latest changelog entry to Slack when the changelog changes.",
    )
    p.add_argument("--force", action="store_true", help="Post even if the changelog is unchanged")
    return p


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        config = load_config()
        return run(config, force=args.force)
    except (NotifyError, OSError, ValueError) as e:
        print(f"[{PROG}] ERROR: {e}", file=sys.stderr, flush=True)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
