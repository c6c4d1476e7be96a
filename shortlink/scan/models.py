from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class CandidateURL:
    uri: str
    domains: frozenset[str] = frozenset()  # registrable domains seen for this URI


@dataclass(frozen=True, slots=True)
class Verdict:
    origin_url: str
    destination_url: str
    destination_domain: str
    origin_domain: str

    @property
    def log_line(self) -> str:
        return f"{self.origin_url} ({self.destination_domain})"

    def as_dict(self) -> dict[str, str]:
        return {
            "origin_url": self.origin_url,
            "destination_url": self.destination_url,
            "destination_domain": self.destination_domain,
            "origin_domain": self.origin_domain,
        }


@dataclass(frozen=True, slots=True)
class Hit:
    rule_name: str
    score: float
    log_line: str
    verdict: Verdict


__all__ = ["CandidateURL", "Verdict", "Hit"]
