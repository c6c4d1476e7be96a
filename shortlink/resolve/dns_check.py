# shortlink/resolve/dns_check.py
"""
Name-resolution availability check.

Redirect probes are pointless (and slow) on a host that cannot resolve
names, so the resolver is skipped entirely unless this check passes.

Modes (DNS_AVAILABLE):
  yes                 assume available, no queries
  no                  assume unavailable
  test                query a few well-known names
  test:a.com b.org    query the listed names instead
"""

from __future__ import annotations

import logging
from functools import lru_cache

import dns.exception
import dns.resolver

from ..config import DNS_TIMEOUT_S

log = logging.getLogger(__name__)

DEFAULT_TEST_NAMES: tuple[str, ...] = ("a.root-servers.net", "example.com", "iana.org")


def _parse_mode(mode: str) -> tuple[str, tuple[str, ...]]:
    m = (mode or "test").strip()
    head, _, tail = m.partition(":")
    head = head.strip().lower()
    names = tuple(n for n in tail.split() if n)
    return head, names


@lru_cache(maxsize=32)
def _any_resolves(names: tuple[str, ...], timeout_s: float) -> bool:
    """
    True if any of `names` has an A or AAAA answer. Cached for the process lifetime.
    """
    r = dns.resolver.Resolver(configure=True)
    r.lifetime = timeout_s
    for name in names:
        for rtype in ("A", "AAAA"):
            try:
                if r.resolve(name, rtype, lifetime=timeout_s):
                    return True
            except dns.exception.DNSException as exc:
                log.debug("DNS test query %s/%s failed: %s", name, rtype, exc)
                continue
    return False


def dns_available(mode: str = "test", *, timeout_s: float | None = None) -> bool:
    head, names = _parse_mode(mode)
    if head == "yes":
        return True
    if head == "no":
        return False
    if head != "test":
        log.warning("Unknown DNS_AVAILABLE mode %r; treating as 'test'", mode)
    timeout = DNS_TIMEOUT_S if timeout_s is None else timeout_s
    ok = _any_resolves(names or DEFAULT_TEST_NAMES, timeout)
    if not ok:
        log.info("DNS not available; redirect resolution disabled")
    return ok


def clear_cache() -> None:
    _any_resolves.cache_clear()


__all__ = ["dns_available", "clear_cache", "DEFAULT_TEST_NAMES"]
