# shortlink/exceptions.py
"""
Shared exception classes used across the codebase.

Only configuration problems are operator-visible; probe failures are
recovered by the resolver and never escape a scan.
"""

from __future__ import annotations


class ConfigError(ValueError):
    """
    Raised when a redirector setting cannot be loaded.

    Examples:
        - ``url_redirector`` with no value (missing required value)
        - ``url_redirector_re`` with no value
        - A malformed regular expression
    """

    def __init__(self, message: str, *, setting: str | None = None) -> None:
        super().__init__(message)
        self.setting = setting


class ProbeError(RuntimeError):
    """
    Raised when a redirect probe fails before a status line is seen.

    Examples:
        - Connection refused / DNS failure
        - Read or connect timeout
        - Malformed HTTP response
        - URL that cannot be requested at all
    """

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"probe failed for {url}: {reason}")
        self.url = url
        self.reason = reason


__all__ = [
    "ConfigError",
    "ProbeError",
]
