# shortlink/resolve/__init__.py
from __future__ import annotations

from .dns_check import clear_cache as clear_dns_cache
from .dns_check import dns_available
from .domain import absolute_location, host_of, uri_to_domain

"""
Resolve package

  - `domain` maps URLs and hosts to their registrable domain (public-suffix aware).
  - `dns_check` decides whether this process can resolve names at all.
"""

__all__ = [
    "uri_to_domain",
    "host_of",
    "absolute_location",
    "dns_available",
    "clear_dns_cache",
]
