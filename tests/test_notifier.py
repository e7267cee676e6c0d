from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest
import requests

from result_hook.dedup import RecentPaths
from result_hook.notifier import NotifyOutcome, WebhookNotifier, build_payload
from result_hook.parser import ParsedResult

WEBHOOK = "https://example.invalid/api/webhooks/1/token"
RESULT_NAME = "Title Here FULL COMBO A 1700000000_123.png"


class FakeResponse:
    def __init__(self, status_code: int = 200, text: str = "") -> None:
        self.status_code = status_code
        self.text = text

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


class FakeSession:
    def __init__(self, status_code: int = 200, error: Exception | None = None) -> None:
        self.status_code = status_code
        self.error = error
        self.calls: list[dict[str, Any]] = []

    def post(self, url: str, **kwargs: Any) -> FakeResponse:
        self.calls.append({"url": url, **kwargs})
        if self.error is not None:
            raise self.error
        return FakeResponse(self.status_code)


def _screenshot(tmp_path: Path, name: str = RESULT_NAME, content: bytes = b"\x89PNG") -> Path:
    path = tmp_path / name
    path.write_bytes(content)
    return path


def test_build_payload_shape() -> None:
    result = ParsedResult("Song", "AA", "HARD CLEAR", "1_2")
    payload = build_payload(result, "1_2.png")
    embed = payload["embeds"][0]
    assert embed["title"] == "Song"
    assert embed["color"] == 65280
    assert embed["image"] == {"url": "attachment://1_2.png"}
    assert embed["fields"] == [
        {"name": ":trophy: Clear Type", "value": "HARD CLEAR"},
        {"name": ":military_medal: Rank", "value": "AA"},
    ]


def test_notify_posts_multipart(tmp_path: Path) -> None:
    session = FakeSession()
    notifier = WebhookNotifier(WEBHOOK, session=session)
    path = _screenshot(tmp_path)

    assert notifier.notify(path) is NotifyOutcome.SENT

    assert len(session.calls) == 1
    call = session.calls[0]
    assert call["url"] == WEBHOOK
    assert call["timeout"] is None
    upload_name, content = call["files"]["file"]
    assert upload_name == "1700000000_123.png"
    assert content == b"\x89PNG"
    payload = json.loads(call["data"]["payload_json"])
    assert payload["embeds"][0]["image"]["url"] == f"attachment://{upload_name}"
    assert payload["embeds"][0]["title"] == "Title Here"


def test_repeat_path_sends_once(tmp_path: Path) -> None:
    session = FakeSession()
    notifier = WebhookNotifier(WEBHOOK, session=session)
    path = _screenshot(tmp_path)

    assert notifier.notify(path) is NotifyOutcome.SENT
    assert notifier.notify(str(path)) is NotifyOutcome.SKIPPED
    assert len(session.calls) == 1


def test_default_marker_only_suppresses_last_path(tmp_path: Path) -> None:
    session = FakeSession()
    notifier = WebhookNotifier(WEBHOOK, session=session)
    first = _screenshot(tmp_path)
    second = _screenshot(tmp_path, "Other EASY CLEAR B 1700000001_1.png")

    notifier.notify(first)
    notifier.notify(second)
    notifier.notify(first)
    assert len(session.calls) == 3


def test_empty_file_is_skipped(tmp_path: Path) -> None:
    session = FakeSession()
    notifier = WebhookNotifier(WEBHOOK, session=session)
    path = _screenshot(tmp_path, content=b"")

    assert notifier.notify(path) is NotifyOutcome.SKIPPED
    assert session.calls == []


def test_non_result_file_is_skipped(tmp_path: Path) -> None:
    session = FakeSession()
    notifier = WebhookNotifier(WEBHOOK, session=session)
    path = _screenshot(tmp_path, "desktop.png")

    assert notifier.notify(path) is NotifyOutcome.SKIPPED
    assert session.calls == []


def test_missing_file_fails(tmp_path: Path) -> None:
    session = FakeSession()
    notifier = WebhookNotifier(WEBHOOK, session=session)

    assert notifier.notify(tmp_path / RESULT_NAME) is NotifyOutcome.FAILED
    assert session.calls == []


def test_transport_error_is_not_marked(tmp_path: Path) -> None:
    session = FakeSession(error=requests.ConnectionError("down"))
    recent = RecentPaths()
    notifier = WebhookNotifier(WEBHOOK, recent=recent, session=session)
    path = _screenshot(tmp_path)

    assert notifier.notify(path) is NotifyOutcome.FAILED
    assert path not in recent
    assert notifier.notify(path) is NotifyOutcome.FAILED
    assert len(session.calls) == 2


@pytest.mark.parametrize("status_code", [204, 400, 500])
def test_any_response_marks_path(tmp_path: Path, status_code: int) -> None:
    session = FakeSession(status_code=status_code)
    recent = RecentPaths()
    notifier = WebhookNotifier(WEBHOOK, recent=recent, session=session)
    path = _screenshot(tmp_path)

    assert notifier.notify(path) is NotifyOutcome.SENT
    assert path in recent


def test_timeout_is_passed_through(tmp_path: Path) -> None:
    session = FakeSession()
    notifier = WebhookNotifier(WEBHOOK, session=session, timeout=7.5)
    notifier.notify(_screenshot(tmp_path))
    assert session.calls[0]["timeout"] == 7.5
