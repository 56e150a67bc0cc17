# -*- coding: utf-8 -*-
"""
Change detection: has the changelog changed since the last notification?

Two interchangeable detectors share the same two methods:
  - has_changed(content) -> bool
  - record(content)      -> None   (called only after every post succeeded)

HashDetector keeps a SHA-256 of the whole file in a small state file.
GitDiffDetector asks git whether the file differs between two revisions and
keeps no state of its own.
"""

from __future__ import annotations

import hashlib
import os
import shlex
import subprocess
import tempfile
from pathlib import Path
from typing import List, Optional

from .config import NotifyConfig
from .errors import ConfigError, GitError


def compute_hash(content: str) -> str:
    return hashlib.sha256(content.encode("utf-8")).hexdigest()


class HashDetector:
    def __init__(self, hash_file: Path):
        self.hash_file = Path(hash_file)

    def read_stored_hash(self) -> Optional[str]:
        try:
            return self.hash_file.read_text(encoding="utf-8").strip()
        except FileNotFoundError:
            return None

    def has_changed(self, content: str) -> bool:
        stored = self.read_stored_hash()
        return stored is None or stored != compute_hash(content)

    def record(self, content: str) -> None:
        """Overwrite the stored hash via a temp file + rename."""
        self.hash_file.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=str(self.hash_file.parent), prefix=".changelog-hash.")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(compute_hash(content) + "\n")
            os.replace(tmp, self.hash_file)
        except Exception:
            if os.path.exists(tmp):
                os.unlink(tmp)
            raise


def run_git(args: List[str], cwd: Path) -> subprocess.CompletedProcess:
    cmd = ["git", *args]
    print("Running:", " ".join(shlex.quote(c) for c in cmd), flush=True)
    try:
        return subprocess.run(
            cmd,
            cwd=str(cwd),
            text=True,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
        )
    except FileNotFoundError as e:
        raise GitError("git executable not found") from e


class GitDiffDetector:
    def __init__(self, repo_root: Path, path: Path, base_ref: Optional[str] = None, head_ref: Optional[str] = None):
        self.repo_root = Path(repo_root)
        self.path = Path(path)
        self.head_ref = head_ref or "HEAD"
        self.base_ref = base_ref or f"{self.head_ref}^"

    def _relpath(self) -> str:
        try:
            return self.path.resolve().relative_to(self.repo_root.resolve()).as_posix()
        except ValueError:
            return str(self.path)

    def revision_exists(self, rev: str) -> bool:
        p = run_git(["rev-parse", "--verify", "--quiet", f"{rev}^{{commit}}"], self.repo_root)
        return p.returncode == 0

    def has_changed(self, content: str) -> bool:
        # No base to compare against (first commit, shallow clone, new branch
        # pushed with an all-zero "before" SHA): assume it changed.
        if not self.revision_exists(self.base_ref):
            print(f"Base revision {self.base_ref} not found; treating changelog as changed.", flush=True)
            return True
        p = run_git(["diff", "--quiet", self.base_ref, self.head_ref, "--", self._relpath()], self.repo_root)
        if p.returncode == 0:
            return False
        if p.returncode == 1:
            return True
        raise GitError(f"git diff failed ({p.returncode}): {p.stderr.strip()}")

    def record(self, content: str) -> None:
        pass


def build_detector(config: NotifyConfig):
    if config.detector == "hash":
        return HashDetector(config.hash_file)
    if config.detector == "git":
        return GitDiffDetector(config.repo_root, config.changelog_path, config.base_ref, config.head_ref)
    raise ConfigError(f"Unknown detector: {config.detector}")
