# shortlink/rules.py
"""
Redirector rule set.

Two kinds of rules identify a URL shortener host:

  url_redirector     bit.ly t.co tinyurl.com        exact (case-insensitive) domains
  url_redirector_re  ^goo\\.gl$ \\.page\\.link$      regexes, searched in configuration order

A DomainRuleSet is immutable once built; reconfiguration builds a new one.
Configuration text is parsed by RuleSetBuilder, which raises ConfigError for
missing values and downgrades malformed regexes to warnings so the remaining
tokens on the line still load.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

from .config import RedirectorSettings
from .exceptions import ConfigError

log = logging.getLogger(__name__)

EXACT_SETTING = "url_redirector"
REGEX_SETTING = "url_redirector_re"

# "/pattern/flags" form; bare tokens are compiled as-is
_DELIMITED_RE = re.compile(r"^/(?P<body>.*)/(?P<flags>[imsx]*)$", re.DOTALL)
_FLAG_BITS = {"i": re.IGNORECASE, "m": re.MULTILINE, "s": re.DOTALL, "x": re.VERBOSE}


def _norm_domain(domain: str) -> str:
    return domain.strip().rstrip(".").lower()


def compile_pattern(token: str) -> re.Pattern[str]:
    """
    Compile one url_redirector_re token.

    Accepts either a bare regex (``\\.ly$``) or a slash-delimited one with
    trailing flags (``/^BIT\\.LY$/i``).
    """
    m = _DELIMITED_RE.match(token)
    body, flags = (m.group("body"), m.group("flags")) if m else (token, "")
    bits = 0
    for ch in flags:
        bits |= _FLAG_BITS[ch]
    try:
        return re.compile(body, bits)
    except re.error as err:
        raise ConfigError(
            f"invalid domain regex {token!r}: {err}", setting=REGEX_SETTING
        ) from err


@dataclass(frozen=True, slots=True)
class DomainRuleSet:
    exact: frozenset[str] = frozenset()
    patterns: tuple[re.Pattern[str], ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.exact and not self.patterns

    def matches(self, domain: str) -> bool:
        """True iff `domain` is an exact redirector or matches any configured regex."""
        if not domain:
            return False
        d = _norm_domain(domain)
        if d in self.exact:
            return True
        for pattern in self.patterns:
            if pattern.search(d):
                log.debug("Domain %s matches regexp %s", d, pattern.pattern)
                return True
        return False

    @classmethod
    def from_settings(cls, settings: RedirectorSettings) -> DomainRuleSet:
        builder = RuleSetBuilder()
        for value in settings.url_redirector:
            builder.add_redirectors(value)
        for value in settings.url_redirector_re:
            builder.add_redirector_patterns(value)
        return builder.build()


@dataclass
class RuleSetBuilder:
    """Accumulates directive values, then freezes them into a DomainRuleSet."""

    exact: set[str] = field(default_factory=set)
    patterns: list[re.Pattern[str]] = field(default_factory=list)
    warnings: list[ConfigError] = field(default_factory=list)

    def add_redirectors(self, value: str | None) -> int:
        """Add every domain on a url_redirector line; returns how many were added."""
        tokens = (value or "").split()
        if not tokens:
            raise ConfigError(f"{EXACT_SETTING}: missing required value", setting=EXACT_SETTING)
        before = len(self.exact)
        for tok in tokens:
            d = _norm_domain(tok)
            if d:
                self.exact.add(d)
        return len(self.exact) - before

    def add_redirector_patterns(self, value: str | None) -> int:
        """
        Compile every regex on a url_redirector_re line.

        A malformed token is logged and recorded in `warnings`; the other
        tokens still load. Returns how many patterns were added.
        """
        tokens = (value or "").split()
        if not tokens:
            raise ConfigError(f"{REGEX_SETTING}: missing required value", setting=REGEX_SETTING)
        added = 0
        for tok in tokens:
            try:
                self.patterns.append(compile_pattern(tok))
                added += 1
            except ConfigError as err:
                log.warning("shortlink: %s", err)
                self.warnings.append(err)
        return added

    def add_directive(self, line: str) -> bool:
        """
        Feed one configuration line. Returns True if it was a redirector
        directive, False for blank lines, comments and unrelated settings.
        """
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            return False
        parts = stripped.split(None, 1)
        key = parts[0].lower()
        value = parts[1] if len(parts) > 1 else ""
        if key == EXACT_SETTING:
            self.add_redirectors(value)
            return True
        if key == REGEX_SETTING:
            self.add_redirector_patterns(value)
            return True
        return False

    def build(self) -> DomainRuleSet:
        return DomainRuleSet(exact=frozenset(self.exact), patterns=tuple(self.patterns))


def parse_directives(lines: Iterable[str]) -> tuple[DomainRuleSet, list[ConfigError]]:
    """
    Build a rule set from configuration lines.

    Empty directive values are reported as errors alongside malformed
    regexes; neither stops the rest of the file from loading.
    """
    builder = RuleSetBuilder()
    for lineno, line in enumerate(lines, start=1):
        try:
            builder.add_directive(line)
        except ConfigError as err:
            log.warning("shortlink: line %d: %s", lineno, err)
            builder.warnings.append(err)
    return builder.build(), builder.warnings


def load_rules_file(path: str | Path) -> tuple[DomainRuleSet, list[ConfigError]]:
    text = Path(path).read_text(encoding="utf-8")
    return parse_directives(text.splitlines())


__all__ = [
    "DomainRuleSet",
    "RuleSetBuilder",
    "compile_pattern",
    "parse_directives",
    "load_rules_file",
    "EXACT_SETTING",
    "REGEX_SETTING",
]
