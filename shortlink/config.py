from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv


def _getenv_int(name: str, default: int) -> int:
    v = os.getenv(name, str(default)).strip()
    try:
        return int(v)
    except ValueError as err:
        raise ValueError(f"Environment variable {name} must be an integer; got {v!r}") from err


def _getenv_float(name: str, default: float) -> float:
    v = os.getenv(name, str(default)).strip()
    try:
        return float(v)
    except ValueError as err:
        raise ValueError(f"Environment variable {name} must be a number; got {v!r}") from err


def _getenv_str(name: str, default: str) -> str:
    return os.getenv(name, default).strip()


def _getenv_list_str(name: str, default: str = "") -> list[str]:
    """Space-separated tokens, the same shape as a url_redirector line."""
    raw = os.getenv(name, default).strip()
    return [tok for tok in raw.split() if tok]


def _getenv_bool(name: str, default: bool) -> bool:
    """
    Read a loosely-typed boolean from the environment.

    Treats "1", "true", "yes", "on" (case-insensitive) as True;
    "0", "false", "no", "off", "" as False. If unset, returns default.
    """
    raw = os.getenv(name)
    if raw is None:
        return default
    v = raw.strip().lower()
    if v in {"1", "true", "yes", "on"}:
        return True
    if v in {"0", "false", "no", "off", ""}:
        return False
    # Fallback: any other non-empty value -> True
    return True


# Load .env from project root if present
ROOT = Path(__file__).resolve().parents[1]
load_dotenv(ROOT / ".env", override=False)

# Browser-like UA: several shorteners answer bot UAs with an interstitial 200
DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (X11; Fedora; Linux x86_64; rv:78.0) Gecko/20100101 Firefox/78.0"
)

# -------------------------------
# Probe config (constants, env-overridable)
# -------------------------------
PROBE_USER_AGENT: str = _getenv_str("PROBE_USER_AGENT", DEFAULT_USER_AGENT)
PROBE_TIMEOUT_S: float = _getenv_float("PROBE_TIMEOUT_S", 5.0)
PROBE_TRUST_ENV: bool = _getenv_bool("PROBE_TRUST_ENV", True)

# -------------------------------
# Scan config (constants, env-overridable)
# -------------------------------
MAX_PROBES_PER_SCAN: int = _getenv_int("MAX_PROBES_PER_SCAN", 6)
PROBE_WORKERS: int = _getenv_int("PROBE_WORKERS", 1)
TINY_URL_RULE_NAME: str = _getenv_str("TINY_URL_RULE_NAME", "TINY_URL")
TINY_URL_SCORE: float = _getenv_float("TINY_URL_SCORE", 1.0)

# "yes" | "no" | "test" | "test:<name>"
DNS_AVAILABLE: str = _getenv_str("DNS_AVAILABLE", "test")
DNS_TIMEOUT_S: float = _getenv_float("DNS_TIMEOUT_S", 2.0)


@dataclass(frozen=True)
class ProbeConfig:
    user_agent: str
    timeout_s: float
    trust_env: bool


@dataclass(frozen=True)
class ScanConfig:
    max_probes: int
    workers: int
    rule_name: str
    score: float


@dataclass(frozen=True)
class DnsConfig:
    mode: str
    timeout_s: float


@dataclass(frozen=True)
class RedirectorSettings:
    """
    Raw redirector directives before validation.

    Each entry is one directive value (a space-separated token line), exactly
    as it would appear after ``url_redirector`` / ``url_redirector_re``.
    """

    url_redirector: list[str] = field(default_factory=list)
    url_redirector_re: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class AppConfig:
    probe: ProbeConfig
    scan: ScanConfig
    dns: DnsConfig
    redirectors: RedirectorSettings


def load_settings() -> AppConfig:
    """Snapshot the environment into an AppConfig (re-read on every call)."""
    probe = ProbeConfig(
        user_agent=_getenv_str("PROBE_USER_AGENT", DEFAULT_USER_AGENT),
        timeout_s=_getenv_float("PROBE_TIMEOUT_S", 5.0),
        trust_env=_getenv_bool("PROBE_TRUST_ENV", True),
    )
    scan = ScanConfig(
        max_probes=max(0, _getenv_int("MAX_PROBES_PER_SCAN", 6)),
        workers=max(1, _getenv_int("PROBE_WORKERS", 1)),
        rule_name=_getenv_str("TINY_URL_RULE_NAME", "TINY_URL"),
        score=_getenv_float("TINY_URL_SCORE", 1.0),
    )
    dns = DnsConfig(
        mode=_getenv_str("DNS_AVAILABLE", "test"),
        timeout_s=_getenv_float("DNS_TIMEOUT_S", 2.0),
    )
    exact = _getenv_list_str("URL_REDIRECTORS")
    patterns = _getenv_list_str("URL_REDIRECTORS_RE")
    redirectors = RedirectorSettings(
        url_redirector=[" ".join(exact)] if exact else [],
        url_redirector_re=[" ".join(patterns)] if patterns else [],
    )
    return AppConfig(probe=probe, scan=scan, dns=dns, redirectors=redirectors)


__all__ = [
    "ProbeConfig",
    "ScanConfig",
    "DnsConfig",
    "RedirectorSettings",
    "AppConfig",
    "load_settings",
    "DEFAULT_USER_AGENT",
    "PROBE_USER_AGENT",
    "PROBE_TIMEOUT_S",
    "PROBE_TRUST_ENV",
    "MAX_PROBES_PER_SCAN",
    "PROBE_WORKERS",
    "TINY_URL_RULE_NAME",
    "TINY_URL_SCORE",
    "DNS_AVAILABLE",
    "DNS_TIMEOUT_S",
]
