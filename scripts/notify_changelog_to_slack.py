#!/usr/bin/env python
# scripts/notify_changelog_to_slack.py
"""
CI entry point: post the latest changelog entry to Slack if the changelog changed.

  python scripts/notify_changelog_to_slack.py [--force]

Set CHANGELOG_DETECTOR=git (with CHANGELOG_BASE_SHA / CHANGELOG_HEAD_SHA from
the push event) to compare revisions instead of keeping a hash file.
"""
from __future__ import annotations

from changelog_notify.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
