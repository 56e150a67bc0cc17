# -*- coding: utf-8 -*-
"""
Slack formatting and webhook delivery.

Markdown -> Slack mrkdwn covers only what changelog entries use:
  ### Heading          -> *Heading*
  **strong**           -> *strong*
  [label](https://..)  -> <https://..|label>
"""

from __future__ import annotations

import json
import re
from typing import Dict, Iterable, List, Optional

import requests

from .config import Destination
from .errors import DeliveryError
from .extract import MAX_CHARS, iter_lines, truncate

SUMMARY_TEXT = "Changelog updated"
BLOCK_PREFIX = "*Changelog updated*\n\nLatest section:\n\n"

STRONG_RX = re.compile(r"\*\*(.+?)\*\*")
LINK_RX = re.compile(r"\[([^\]\n]+)\]\(([^)\s]+)\)")


def _heading_rx(level: int):
    return re.compile(r"^ {0,3}#{%d,6}[ \t]+(.+?)[ \t#]*$" % level)


def _bold_heading(m) -> str:
    # mrkdwn has one emphasis style, so inner **...** would break the wrapper
    title = STRONG_RX.sub(r"\1", m.group(1)).strip()
    return f"*{title}*"


def to_slack_mrkdwn(text: str, level: int = 3) -> str:
    heading_rx = _heading_rx(level)
    lines = [line if fenced else heading_rx.sub(_bold_heading, line) for line, fenced in iter_lines(text)]
    out = "\n".join(lines)
    out = STRONG_RX.sub(r"*\1*", out)
    out = LINK_RX.sub(lambda m: f"<{m.group(2)}|{m.group(1)}>", out)
    return out


def build_slack_payload(latest_text: str, level: int = 3) -> Dict[str, object]:
    # the prefix counts toward Slack's per-block limit too
    body = truncate(to_slack_mrkdwn(latest_text, level), MAX_CHARS - len(BLOCK_PREFIX))
    return {
        "text": SUMMARY_TEXT,
        "blocks": [
            {
                "type": "section",
                "text": {
                    "type": "mrkdwn",
                    "text": BLOCK_PREFIX + body,
                },
            }
        ],
    }


def post_to_slack(webhook_url: str, payload: Dict[str, object], timeout: Optional[float] = None) -> None:
    try:
        r = requests.post(
            webhook_url,
            data=json.dumps(payload),
            headers={"Content-Type": "application/json"},
            timeout=timeout,
        )
    except requests.RequestException as e:
        raise DeliveryError(f"Slack connection error: {e}") from e
    if not r.ok:
        raise DeliveryError(
            f"Slack webhook failed: {r.status_code} {r.reason}",
            status_code=r.status_code,
            reason=r.reason or "",
        )


def deliver(destinations: Iterable[Destination], payload: Dict[str, object], timeout: Optional[float] = None) -> List[str]:
    """
    Post to each destination in order. The first failure propagates and the
    remaining destinations are not attempted.
    """
    sent: List[str] = []
    for dest in destinations:
        post_to_slack(dest.url, payload, timeout=timeout)
        print(f"Posted to Slack ({dest.name}) ✓", flush=True)
        sent.append(dest.name)
    return sent
