# shortlink/scan/resolver.py
"""
Short-URL resolution for one scanned document.

Flow per document (ScanSession):
  1) skip entirely when DNS is unavailable or no redirector rules are loaded
  2) select distinct URIs having at least one domain that matches the rules
  3) probe at most `session.max_probes` of them (HEAD, first hop only)
  4) for each 3xx + Location: compare registrable domains of origin and
     destination; same domain -> discard, otherwise re-check the origin
     against the rules and emit a Verdict
  5) every destination with a Verdict is added to the session's URI
     registry, without being probed itself

Probe failures discard that URI only. Verdicts come back in registry order
whatever the worker count.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from concurrent.futures import ThreadPoolExecutor

from ..config import PROBE_WORKERS
from ..exceptions import ProbeError
from ..fetch.probe import ProbeResult, RedirectProbe
from ..resolve.domain import absolute_location, uri_to_domain
from ..rules import DomainRuleSet
from .models import CandidateURL, Verdict
from .session import ScanSession

log = logging.getLogger(__name__)

DomainOf = Callable[[str], str | None]
# (issued, result): issued is False once the per-document budget is spent
_Outcome = tuple[bool, ProbeResult | None]


class TinyUrlResolver:
    def __init__(
        self,
        rules: DomainRuleSet,
        *,
        probe: RedirectProbe | None = None,
        workers: int | None = None,
        domain_of: DomainOf = uri_to_domain,
    ) -> None:
        self.rules = rules
        self.workers = max(1, PROBE_WORKERS if workers is None else int(workers))
        self.domain_of = domain_of
        self._owns_probe = probe is None
        self._probe = probe if probe is not None else RedirectProbe()

    # ---- selection -------------------------------------------------------------------

    def select(self, candidates: Iterable[CandidateURL]) -> list[str]:
        """Distinct URIs with at least one associated domain matching the rules."""
        selected: dict[str, None] = {}
        for cand in candidates:
            if cand.uri in selected:
                continue
            for dom in sorted(cand.domains):
                log.debug("Checking domain %s", dom)
                if self.rules.matches(dom):
                    selected[cand.uri] = None
                    break
        return list(selected)

    # ---- probing ---------------------------------------------------------------------

    def _probe_one(self, session: ScanSession, uri: str) -> _Outcome:
        if not session.budget.try_acquire():
            return False, None
        try:
            return True, self._probe.probe(uri)
        except ProbeError as exc:
            log.debug("Discarding %s: %s", uri, exc)
            return True, None

    def _probe_all(self, session: ScanSession, uris: list[str]) -> list[_Outcome]:
        if self.workers == 1 or len(uris) <= 1:
            return [self._probe_one(session, uri) for uri in uris]
        with ThreadPoolExecutor(max_workers=min(self.workers, len(uris))) as pool:
            # map() yields in submission order, which keeps verdict order stable
            return list(pool.map(lambda u: self._probe_one(session, u), uris))

    # ---- classification --------------------------------------------------------------

    def classify(self, origin_url: str, result: ProbeResult) -> Verdict | None:
        if not result.is_redirect or result.location is None:
            return None

        destination = absolute_location(origin_url, result.location)
        if destination is None:
            log.debug("Unparseable Location %r from %s; skipping", result.location, origin_url)
            return None
        dest_dom = self.domain_of(destination)
        origin_dom = self.domain_of(origin_url)
        if not dest_dom or not origin_dom:
            log.debug("No domain for %s -> %s; skipping", origin_url, destination)
            return None

        # Same-site hop (e.g. /abc -> /abc/), not a shortener resolution
        if dest_dom == origin_dom:
            return None

        if not self.rules.matches(origin_dom):
            log.debug("Origin %s no longer matches redirector rules", origin_dom)
            return None

        return Verdict(
            origin_url=origin_url,
            destination_url=destination,
            destination_domain=dest_dom,
            origin_domain=origin_dom,
        )

    # ---- entry point -----------------------------------------------------------------

    def resolve(self, session: ScanSession) -> list[Verdict]:
        if not session.dns_available:
            log.debug("DNS not available; skipping redirector checks")
            return []
        if self.rules.is_empty:
            log.debug("No url_redirector rules configured; skipping")
            return []

        selected = self.select(session.candidates())
        if not selected:
            return []

        to_probe = selected[: session.budget.remaining]
        if len(selected) > len(to_probe):
            log.debug(
                "Probing %d of %d redirector URIs (cap %d)",
                len(to_probe),
                len(selected),
                session.budget.limit,
            )

        outcomes = self._probe_all(session, to_probe)

        out: list[Verdict] = []
        for uri, (issued, result) in zip(to_probe, outcomes):
            if issued:
                session.probed.append(uri)
            if result is None:
                continue
            verdict = self.classify(uri, result)
            if verdict is None:
                continue
            log.debug("Adding %s to uri list (from %s)", verdict.destination_url, uri)
            session.add_uri(verdict.destination_url, (verdict.destination_domain,))
            session.verdicts.append(verdict)
            out.append(verdict)
        return out

    # ---- lifecycle -------------------------------------------------------------------

    def close(self) -> None:
        if self._owns_probe:
            self._probe.close()

    def __enter__(self) -> TinyUrlResolver:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


def resolve_candidates(
    candidates: Iterable[CandidateURL],
    rules: DomainRuleSet,
    *,
    dns_available: bool = True,
    probe: RedirectProbe | None = None,
    max_probes: int | None = None,
    workers: int | None = None,
) -> list[Verdict]:
    """
    One-shot convenience: build a session from `candidates`, resolve, return verdicts.
    """
    session = ScanSession.from_candidates(
        candidates, dns_available=dns_available, max_probes=max_probes
    )
    if not dns_available or rules.is_empty:
        return []
    with TinyUrlResolver(rules, probe=probe, workers=workers) as resolver:
        return resolver.resolve(session)


__all__ = ["TinyUrlResolver", "resolve_candidates"]
