# tests/conftest.py
from __future__ import annotations

import sys
import threading
from pathlib import Path

import pytest

# Ensure project root importable
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from shortlink.exceptions import ProbeError  # noqa: E402
from shortlink.fetch.probe import ProbeResult  # noqa: E402
from shortlink.resolve import dns_check  # noqa: E402


class FakeProbe:
    """
    Stand-in for RedirectProbe.

    `responses` maps url -> (status, location) or an exception instance.
    Unknown URLs answer 200 with no Location. Thread-safe call log.
    """

    def __init__(self, responses: dict[str, object] | None = None) -> None:
        self.responses = dict(responses or {})
        self.calls: list[str] = []
        self._lock = threading.Lock()

    def probe(self, url: str) -> ProbeResult:
        with self._lock:
            self.calls.append(url)
        answer = self.responses.get(url, (200, None))
        if isinstance(answer, BaseException):
            raise ProbeError(url, str(answer))
        status, location = answer  # type: ignore[misc]
        return ProbeResult(url=url, status_code=status, location=location)

    def close(self) -> None:
        pass


@pytest.fixture
def fake_probe() -> FakeProbe:
    return FakeProbe()


@pytest.fixture
def make_probe() -> type[FakeProbe]:
    return FakeProbe


@pytest.fixture(autouse=True)
def _reset_dns_cache():
    # make tests independent
    dns_check.clear_cache()
    yield
    dns_check.clear_cache()
