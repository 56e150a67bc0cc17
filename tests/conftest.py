"""
Shared fixtures: a sample changelog, a config rooted in tmp_path, and a fake
requests.post that records Slack webhook calls instead of sending them.
"""

from __future__ import annotations

import json
from pathlib import Path
from types import SimpleNamespace

import pytest
import requests

from changelog_notify.config import Destination, NotifyConfig

INTERNAL_URL = "https://hooks.slack.test/internal"
COMMUNITY_URL = "https://hooks.slack.test/community"

ENV_VARS = (
    "INTERNAL_SLACK_WEBHOOK",
    "COMMUNITY_SLACK_WEBHOOK",
    "CHANGELOG_HASH_FILE",
    "CHANGELOG_DETECTOR",
    "CHANGELOG_BASE_SHA",
    "CHANGELOG_HEAD_SHA",
    "CHANGELOG_FILE",
    "CHANGELOG_HEADING_LEVEL",
)

SAMPLE_CHANGELOG = """\
---
title: "Changelog"
description: "Product updates"
---

Welcome to the changelog.

## Timeline

### February 2026

**New:** added **bold** exports. See [the docs](https://docs.example.test/exports).

- Faster sync

---

### January 2026

- Older item
"""


class FakeResponse:
    def __init__(self, status_code: int = 200, reason: str = "OK"):
        self.status_code = status_code
        self.reason = reason

    @property
    def ok(self) -> bool:
        return self.status_code < 400


@pytest.fixture
def fake_slack(monkeypatch):
    calls = []
    statuses = {}

    def fake_post(url, data=None, headers=None, timeout=None, **kwargs):
        calls.append({"url": url, "payload": json.loads(data), "headers": headers, "timeout": timeout})
        code = statuses.get(url, 200)
        return FakeResponse(code, "OK" if code < 400 else "Internal Server Error")

    monkeypatch.setattr(requests, "post", fake_post)
    return SimpleNamespace(calls=calls, statuses=statuses)


@pytest.fixture
def changelog(tmp_path: Path) -> Path:
    p = tmp_path / "changelog.mdx"
    p.write_text(SAMPLE_CHANGELOG, encoding="utf-8")
    return p


@pytest.fixture
def config(tmp_path: Path, changelog: Path) -> NotifyConfig:
    return NotifyConfig(
        repo_root=tmp_path,
        changelog_path=changelog,
        hash_file=tmp_path / "scripts" / ".changelog-hash",
        destinations=[
            Destination("internal", INTERNAL_URL, "INTERNAL_SLACK_WEBHOOK"),
            Destination("community", COMMUNITY_URL, "COMMUNITY_SLACK_WEBHOOK"),
        ],
    )


@pytest.fixture
def clean_env(monkeypatch, tmp_path: Path) -> Path:
    """Run from tmp_path with every changelog-notify variable blank."""
    monkeypatch.chdir(tmp_path)
    for var in ENV_VARS:
        monkeypatch.setenv(var, "")
    return tmp_path
