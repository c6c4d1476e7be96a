# shortlink/fetch/probe.py
from __future__ import annotations

import logging
from dataclasses import dataclass

import httpx

from ..config import PROBE_TIMEOUT_S, PROBE_TRUST_ENV, PROBE_USER_AGENT
from ..exceptions import ProbeError

log = logging.getLogger(__name__)

# --------------------------------------------------------------------------------------------------
# Results
# --------------------------------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ProbeResult:
    url: str
    status_code: int
    location: str | None

    @property
    def is_redirect(self) -> bool:
        # Any 3xx counts; the code itself (301/302/303/307/308/...) is not special-cased
        return 300 <= self.status_code < 400 and bool(self.location)


# --------------------------------------------------------------------------------------------------
# Client
# --------------------------------------------------------------------------------------------------


class RedirectProbe:
    """
    Single-hop HEAD prober.

    Flow:
      1) HEAD url with redirects disabled, so the first Location is observed
      2) return status + Location as a ProbeResult
      3) any transport / protocol / URL failure -> ProbeError

    Proxies come from the environment (HTTP_PROXY, HTTPS_PROXY, NO_PROXY).
    The underlying httpx.Client is thread-safe, so one probe can serve a
    whole worker pool.
    """

    def __init__(
        self,
        *,
        user_agent: str | None = None,
        timeout_s: float | None = None,
        trust_env: bool | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.user_agent = user_agent or PROBE_USER_AGENT
        self.timeout_s = PROBE_TIMEOUT_S if timeout_s is None else float(timeout_s)
        self._client = httpx.Client(
            headers={"User-Agent": self.user_agent},
            timeout=httpx.Timeout(self.timeout_s),
            follow_redirects=False,
            trust_env=PROBE_TRUST_ENV if trust_env is None else trust_env,
            transport=transport,
        )

    def probe(self, url: str) -> ProbeResult:
        try:
            resp = self._client.head(url)
        except httpx.HTTPError as exc:
            raise ProbeError(url, f"{type(exc).__name__}: {exc}") from exc
        except httpx.InvalidURL as exc:
            raise ProbeError(url, f"invalid url: {exc}") from exc

        status = int(resp.status_code)
        location = resp.headers.get("location")
        log.debug("HEAD %s -> %d location=%s", url, status, location)
        return ProbeResult(url=url, status_code=status, location=location or None)

    # ----------------------------------------------------------------------------------
    # Context manager
    # ----------------------------------------------------------------------------------

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> RedirectProbe:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


def probe_url(url: str) -> ProbeResult:
    """
    One-off convenience wrapper.

    Usage:
        from shortlink.fetch import probe_url
        res = probe_url("https://bit.ly/abc")
    """
    with RedirectProbe() as p:
        return p.probe(url)


__all__ = [
    "ProbeResult",
    "RedirectProbe",
    "probe_url",
]
