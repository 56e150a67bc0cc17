# -*- coding: utf-8 -*-
"""
Runtime configuration.

Everything the pipeline needs is collected once into a NotifyConfig and passed
down explicitly. Values come from the environment (and an optional .env file
at the repo root):

  INTERNAL_SLACK_WEBHOOK    Incoming webhook URL for the internal channel
  COMMUNITY_SLACK_WEBHOOK   Incoming webhook URL for the community channel
  CHANGELOG_HASH_FILE       Last-posted hash (default: scripts/.changelog-hash)
  CHANGELOG_DETECTOR        "hash" (default) or "git"
  CHANGELOG_BASE_SHA        git: older revision (default: HEAD^)
  CHANGELOG_HEAD_SHA        git: newer revision (default: HEAD)
  CHANGELOG_FILE            Changelog path (default: changelog.mdx)
  CHANGELOG_HEADING_LEVEL   Depth of the dated entry headings (default: 3)
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Mapping, Optional

from dotenv import load_dotenv

from .errors import ConfigError

DEFAULT_CHANGELOG = "changelog.mdx"
DEFAULT_HASH_FILE = os.path.join("scripts", ".changelog-hash")
DEFAULT_MARKER = "## Timeline"
DEFAULT_HEADING_LEVEL = 3
DETECTORS = ("hash", "git")

# (destination name, env var) in delivery order
WEBHOOK_VARS = (
    ("internal", "INTERNAL_SLACK_WEBHOOK"),
    ("community", "COMMUNITY_SLACK_WEBHOOK"),
)


@dataclass
class Destination:
    name: str
    url: str
    env_var: str = ""


@dataclass
class NotifyConfig:
    repo_root: Path
    changelog_path: Path
    hash_file: Path
    detector: str = "hash"
    base_ref: Optional[str] = None
    head_ref: Optional[str] = None
    timeline_marker: str = DEFAULT_MARKER
    heading_level: int = DEFAULT_HEADING_LEVEL
    destinations: List[Destination] = field(default_factory=list)
    timeout: Optional[float] = None

    def require_destinations(self) -> List[Destination]:
        """Return the destinations, or raise if any webhook URL is unset."""
        missing = [d.env_var or d.name for d in self.destinations if not d.url]
        if missing:
            raise ConfigError(f"Set {' and '.join(missing)}")
        if not self.destinations:
            raise ConfigError("No Slack destinations configured")
        return self.destinations


def _resolve(root: Path, value: str) -> Path:
    p = Path(value).expanduser()
    return p if p.is_absolute() else root / p


def _heading_level(raw: str) -> int:
    try:
        level = int(raw)
    except ValueError:
        raise ConfigError(f"CHANGELOG_HEADING_LEVEL must be an integer, got {raw!r}") from None
    if not 1 <= level <= 6:
        raise ConfigError(f"CHANGELOG_HEADING_LEVEL must be between 1 and 6, got {level}")
    return level


def load_config(env: Optional[Mapping[str, str]] = None, repo_root: Optional[Path] = None) -> NotifyConfig:
    """
    Build a NotifyConfig from `env` (default: the process environment).
    Missing webhook URLs are allowed here; the pipeline checks them only once
    it knows there is something to post.
    """
    root = Path(repo_root or Path.cwd()).resolve()
    if env is None:
        # real environment wins over .env
        load_dotenv(root / ".env", override=False)
        env = os.environ

    def get(name: str) -> str:
        return (env.get(name) or "").strip()

    detector = get("CHANGELOG_DETECTOR").lower() or "hash"
    if detector not in DETECTORS:
        raise ConfigError(f"CHANGELOG_DETECTOR must be one of {', '.join(DETECTORS)}, got {detector!r}")

    level_raw = get("CHANGELOG_HEADING_LEVEL")
    level = _heading_level(level_raw) if level_raw else DEFAULT_HEADING_LEVEL

    return NotifyConfig(
        repo_root=root,
        changelog_path=_resolve(root, get("CHANGELOG_FILE") or DEFAULT_CHANGELOG),
        hash_file=_resolve(root, get("CHANGELOG_HASH_FILE") or DEFAULT_HASH_FILE),
        detector=detector,
        base_ref=get("CHANGELOG_BASE_SHA") or None,
        head_ref=get("CHANGELOG_HEAD_SHA") or None,
        heading_level=level,
        destinations=[Destination(name, get(var), var) for name, var in WEBHOOK_VARS],
    )
