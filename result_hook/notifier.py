"""Webhook notifier for Result Hook.

Turns one result screenshot into one multipart POST: the image as the
``file`` part and a rich embed as the ``payload_json`` field.  There is
no retry; a failed delivery is logged and dropped.
"""

from __future__ import annotations

import enum
import json
import logging
import os
from pathlib import Path
from typing import Any

import requests

from result_hook.dedup import RecentPaths
from result_hook.parser import ParsedResult, ParseFailure, parse_filename

logger = logging.getLogger(__name__)

EMBED_COLOR = 0x00FF00
CLEAR_TYPE_FIELD = ":trophy: Clear Type"
RANK_FIELD = ":military_medal: Rank"


class NotifyOutcome(enum.Enum):
    SENT = "sent"
    SKIPPED = "skipped"
    FAILED = "failed"


def build_payload(result: ParsedResult, upload_name: str) -> dict[str, Any]:
    """Return the webhook JSON body describing *result*.

    The embed image points at the attached file via ``attachment://``,
    so *upload_name* must be the same name given to the file part.
    """
    return {
        "embeds": [
            {
                "title": result.title,
                "color": EMBED_COLOR,
                "image": {"url": f"attachment://{upload_name}"},
                "fields": [
                    {"name": CLEAR_TYPE_FIELD, "value": result.clear_type},
                    {"name": RANK_FIELD, "value": result.rank},
                ],
            }
        ]
    }


class WebhookNotifier:
    """
    Posts result screenshots to a webhook.

    Parameters
    ----------
    webhook : str
        Destination URL.
    recent : RecentPaths, optional
        Paths already sent; a repeat is skipped.  Defaults to remembering
        only the last sent path.
    session : requests.Session, optional
        HTTP session used for the POST.
    timeout : float, optional
        Request timeout in seconds.  None waits indefinitely.
    """

    def __init__(
        self,
        webhook: str,
        recent: RecentPaths | None = None,
        session: requests.Session | None = None,
        timeout: float | None = None,
    ):
        self.webhook = webhook
        self._recent = recent if recent is not None else RecentPaths()
        self._session = session or requests.Session()
        self._timeout = timeout

    @property
    def timeout(self) -> float | None:
        """Return the request timeout in seconds (None = no timeout)."""
        return self._timeout

    def notify(self, path: str | Path) -> NotifyOutcome:
        """Send the screenshot at *path* unless it should be skipped."""
        path = Path(path)
        if path in self._recent:
            logger.debug("Already sent %s, skipping", path)
            return NotifyOutcome.SKIPPED

        result = parse_filename(path.name)
        if isinstance(result, ParseFailure):
            logger.debug("Not a result screenshot (%s): %s", result.reason, path.name)
            return NotifyOutcome.SKIPPED

        upload_name = result.upload_name(path.suffix)
        try:
            with open(path, "rb") as fh:
                if os.fstat(fh.fileno()).st_size == 0:
                    logger.debug("Empty file, skipping: %s", path)
                    return NotifyOutcome.SKIPPED
                content = fh.read()
        except OSError as exc:
            logger.error("Could not read %s: %s", path, exc)
            return NotifyOutcome.FAILED

        payload = build_payload(result, upload_name)
        try:
            resp = self._session.post(
                self.webhook,
                files={"file": (upload_name, content)},
                data={"payload_json": json.dumps(payload)},
                timeout=self._timeout,
            )
        except requests.RequestException as exc:
            logger.error("Webhook delivery failed for %s: %s", path.name, exc)
            return NotifyOutcome.FAILED

        # Marked even on an HTTP error status; only a transport error leaves it unmarked
        self._recent.mark(path)
        if resp.ok:
            logger.info(
                "Sent %s (%s, %s): status %s",
                result.title,
                result.clear_type,
                result.rank,
                resp.status_code,
            )
        else:
            logger.warning(
                "Webhook rejected %s: status %s", path.name, resp.status_code
            )
        logger.debug("Webhook response: %s", resp.text)
        return NotifyOutcome.SENT
