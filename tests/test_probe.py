# tests/test_probe.py
from __future__ import annotations

import httpx
import pytest
import respx
from httpx import Response

from shortlink.exceptions import ProbeError
from shortlink.fetch.probe import ProbeResult, RedirectProbe


@pytest.fixture
def probe():
    with RedirectProbe(trust_env=False, user_agent="ShortlinkTest/1.0") as p:
        yield p


def test_head_redirect_is_not_followed(probe):
    with respx.mock(assert_all_called=False) as router:
        first = router.head("http://tiny.example/abc").mock(
            return_value=Response(301, headers={"Location": "http://real.example/page"})
        )
        target = router.head("http://real.example/page").mock(return_value=Response(200))

        res = probe.probe("http://tiny.example/abc")

    assert res == ProbeResult(
        url="http://tiny.example/abc", status_code=301, location="http://real.example/page"
    )
    assert res.is_redirect
    assert first.call_count == 1
    assert target.call_count == 0  # first hop only


@respx.mock
def test_probe_uses_head_and_user_agent(probe):
    route = respx.route(url="http://tiny.example/ua").mock(return_value=Response(204))
    probe.probe("http://tiny.example/ua")
    req = route.calls.last.request
    assert req.method == "HEAD"
    assert req.headers["User-Agent"] == "ShortlinkTest/1.0"


@pytest.mark.parametrize("status", [300, 301, 302, 303, 307, 308, 399])
def test_any_3xx_with_location_is_redirect(status):
    assert ProbeResult("u", status, "http://x.example/").is_redirect


@pytest.mark.parametrize(
    "status,location",
    [(200, None), (200, "http://x.example/"), (302, None), (302, ""), (404, None), (500, None)],
)
def test_not_redirect(status, location):
    assert not ProbeResult("u", status, location).is_redirect


@respx.mock
def test_redirect_without_location(probe):
    respx.head("http://tiny.example/x").mock(return_value=Response(302))
    res = probe.probe("http://tiny.example/x")
    assert res.status_code == 302
    assert res.location is None
    assert not res.is_redirect


@respx.mock
@pytest.mark.parametrize(
    "exc",
    [httpx.ConnectTimeout, httpx.ReadTimeout, httpx.ConnectError, httpx.RemoteProtocolError],
)
def test_network_failures_become_probe_error(probe, exc):
    respx.head("http://tiny.example/err").mock(side_effect=exc)
    with pytest.raises(ProbeError) as ei:
        probe.probe("http://tiny.example/err")
    assert ei.value.url == "http://tiny.example/err"
    assert isinstance(ei.value.__cause__, exc)


def test_unrequestable_url_becomes_probe_error(probe):
    with pytest.raises(ProbeError):
        probe.probe("ftp://tiny.example/file")


def test_defaults_from_config():
    with RedirectProbe() as p:
        assert p.timeout_s == 5.0
        assert "Mozilla/5.0" in p.user_agent
