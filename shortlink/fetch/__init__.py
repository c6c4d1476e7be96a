"""
Redirect probe package: one HEAD request, no redirect following.

Public entry points:
  - RedirectProbe, ProbeResult
  - probe_url(url) -> ProbeResult
"""

from .probe import (
    ProbeResult,
    RedirectProbe,
    probe_url,
)

__all__ = [
    "ProbeResult",
    "RedirectProbe",
    "probe_url",
]
