"""
Short-URL redirector resolution for message scanners.

Public entry points:
  - DomainRuleSet, RuleSetBuilder, parse_directives, load_rules_file
  - RedirectProbe, ProbeResult
  - ScanSession, CandidateURL, TinyUrlResolver, resolve_candidates
  - Verdict, Hit, HitReporter
  - uri_to_domain, dns_available
  - ConfigError, ProbeError
"""

from .exceptions import ConfigError, ProbeError
from .fetch import ProbeResult, RedirectProbe
from .resolve import dns_available, uri_to_domain
from .rules import DomainRuleSet, RuleSetBuilder, load_rules_file, parse_directives
from .scan import (
    CandidateURL,
    Hit,
    HitReporter,
    ScanSession,
    TinyUrlResolver,
    Verdict,
    resolve_candidates,
)

__all__ = [
    "ConfigError",
    "ProbeError",
    "ProbeResult",
    "RedirectProbe",
    "dns_available",
    "uri_to_domain",
    "DomainRuleSet",
    "RuleSetBuilder",
    "load_rules_file",
    "parse_directives",
    "CandidateURL",
    "Hit",
    "HitReporter",
    "ScanSession",
    "TinyUrlResolver",
    "Verdict",
    "resolve_candidates",
]

__version__ = "0.1.0"
