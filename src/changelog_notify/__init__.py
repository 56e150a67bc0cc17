# -*- coding: utf-8 -*-
"""
changelog-notify
Post the newest changelog Timeline entry to Slack when the changelog changes.
"""

__version__ = "0.1.0"
