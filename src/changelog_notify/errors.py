# -*- coding: utf-8 -*-
"""Errors raised by changelog-notify. The CLI maps all of them to exit code 1."""

from __future__ import annotations

from typing import Optional


class NotifyError(RuntimeError):
    pass


class ConfigError(NotifyError):
    pass


class ExtractionError(NotifyError):
    pass


class GitError(NotifyError):
    pass


class DeliveryError(NotifyError):
    def __init__(self, message: str, status_code: Optional[int] = None, reason: str = ""):
        super().__init__(message)
        self.status_code = status_code
        self.reason = reason
