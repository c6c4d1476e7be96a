from __future__ import annotations

import ipaddress
from urllib.parse import urljoin, urlsplit

import idna
import tldextract

# Public Suffix handling: use bundled list only (no network fetch)
_EXTRACT = tldextract.TLDExtract(cache_dir=False, suffix_list_urls=())


def _to_punycode(domain_like: str) -> str:
    # Accept unicode or ascii; return ascii/punycode (lowercase)
    return idna.encode(domain_like).decode("ascii").lower()


def _registrable(host: str) -> str:
    """
    Collapse any subdomain to the registrable domain (apex),
    e.g. blog.acme.co.uk -> acme.co.uk

    Hosts under a suffix the public list does not know (``tiny.example``,
    ``localhost``) are returned unchanged.
    """
    ext = _EXTRACT(host)
    if not ext.suffix or not ext.domain:
        return host
    return f"{ext.domain}.{ext.suffix}".lower()


def _is_ip(host: str) -> bool:
    try:
        ipaddress.ip_address(host)
    except ValueError:
        return False
    return True


def host_of(uri: str) -> str | None:
    """
    Lower-cased host of a URL or bare host string, without port, userinfo or
    trailing dot. Returns None when there is no host (relative or opaque URIs).
    """
    s = (uri or "").strip()
    if not s:
        return None
    try:
        parts = urlsplit(s)
        if not parts.netloc:
            if parts.scheme or s.startswith("/"):
                return None
            # bare "host/path" form as found in message text
            parts = urlsplit(f"http://{s}")
        host = parts.hostname
    except ValueError:
        # e.g. "http://[bad/" (unbalanced IPv6 brackets)
        return None
    if not host:
        return None
    return host.rstrip(".") or None


def uri_to_domain(uri: str) -> str | None:
    """
    Map a URL (or host) to its registrable domain in punycode.

      http://Sub.Example.co.uk:8080/x  -> example.co.uk
      https://bücher.de/               -> xn--bcher-kva.de
      http://192.0.2.7/                -> 192.0.2.7
    """
    host = host_of(uri)
    if host is None:
        return None
    if _is_ip(host):
        return host
    try:
        host = _to_punycode(host)
    except idna.IDNAError:
        # Underscores and other non-IDNA labels still appear in real hostnames
        host = host.lower()
    return _registrable(host)


def absolute_location(origin_url: str, location: str) -> str | None:
    """
    Resolve a (possibly relative) Location header against the probed URL.
    Returns None when the header cannot be parsed as a URL.
    """
    try:
        return urljoin(origin_url, location.strip())
    except ValueError:
        return None


__all__ = [
    "host_of",
    "uri_to_domain",
    "absolute_location",
]
