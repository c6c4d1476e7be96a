# shortlink/scan/session.py
"""
Per-document scan state.

One ScanSession is created for each scanned message and thrown away after
it; nothing here is shared across documents. It holds:

  - the URI registry (uri -> CandidateURL), in extraction order; resolved
    destinations are appended so later scanners see them too
  - the probe budget (at most N HEAD requests per document)
  - what was probed and which verdicts were produced
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from ..config import MAX_PROBES_PER_SCAN
from ..resolve.domain import uri_to_domain
from .models import CandidateURL, Verdict

log = logging.getLogger(__name__)


class ProbeBudget:
    """
    Lock-protected countdown of probes left for one document.

    Workers call try_acquire() before issuing a request; once the limit is
    reached every further call returns False.
    """

    def __init__(self, limit: int) -> None:
        self.limit = max(0, int(limit))
        self._issued = 0
        self._lock = threading.Lock()

    def try_acquire(self) -> bool:
        with self._lock:
            if self._issued >= self.limit:
                return False
            self._issued += 1
            return True

    @property
    def issued(self) -> int:
        with self._lock:
            return self._issued

    @property
    def remaining(self) -> int:
        with self._lock:
            return self.limit - self._issued


def _domains_from(info: Any) -> Iterable[str]:
    # Accept {"domains": {...}}, a bare iterable of domains, or None
    if info is None:
        return ()
    if isinstance(info, Mapping):
        doms = info.get("domains") or ()
        return doms.keys() if isinstance(doms, Mapping) else doms
    if isinstance(info, str):
        return (info,)
    return info


@dataclass
class ScanSession:
    dns_available: bool = True
    max_probes: int = MAX_PROBES_PER_SCAN
    uris: dict[str, CandidateURL] = field(default_factory=dict)
    probed: list[str] = field(default_factory=list)
    verdicts: list[Verdict] = field(default_factory=list)
    budget: ProbeBudget = field(init=False)

    def __post_init__(self) -> None:
        self.budget = ProbeBudget(self.max_probes)

    @classmethod
    def from_uri_details(
        cls,
        details: Mapping[str, Any],
        *,
        dns_available: bool = True,
        max_probes: int | None = None,
    ) -> ScanSession:
        """
        Build a session from a caller's uri -> info map, where info is either
        a record with a "domains" key or an iterable of domains.
        """
        session = cls(
            dns_available=dns_available,
            max_probes=MAX_PROBES_PER_SCAN if max_probes is None else max_probes,
        )
        for uri, info in details.items():
            session.add_uri(uri, _domains_from(info), derive=False)
        return session

    @classmethod
    def from_candidates(
        cls,
        candidates: Iterable[CandidateURL],
        *,
        dns_available: bool = True,
        max_probes: int | None = None,
    ) -> ScanSession:
        session = cls(
            dns_available=dns_available,
            max_probes=MAX_PROBES_PER_SCAN if max_probes is None else max_probes,
        )
        for cand in candidates:
            session.add_uri(cand.uri, cand.domains, derive=False)
        return session

    def add_uri(
        self, uri: str, domains: Iterable[str] = (), *, derive: bool = True
    ) -> CandidateURL:
        """
        Register `uri`, merging domains if it is already known.

        With `derive` and no domains given, the URI's own registrable domain
        is used.
        """
        doms = {d.strip().lower() for d in domains if d and d.strip()}
        if not doms and derive:
            own = uri_to_domain(uri)
            if own:
                doms.add(own)
        existing = self.uris.get(uri)
        if existing is not None:
            doms |= existing.domains
        cand = CandidateURL(uri=uri, domains=frozenset(doms))
        self.uris[uri] = cand
        return cand

    def candidates(self) -> list[CandidateURL]:
        return list(self.uris.values())


__all__ = ["ProbeBudget", "ScanSession"]
