from __future__ import annotations

import logging
from collections.abc import Iterable

from ..config import TINY_URL_RULE_NAME, TINY_URL_SCORE
from .models import Hit, Verdict
from .session import ScanSession

log = logging.getLogger(__name__)


class HitReporter:
    """
    Turns verdicts into scoring hits under one fixed rule name.

    Every verdict scores the same; the operator line is
    "<origin url> (<destination domain>)".
    """

    def __init__(self, rule_name: str | None = None, score: float | None = None) -> None:
        self.rule_name = rule_name or TINY_URL_RULE_NAME
        self.score = TINY_URL_SCORE if score is None else float(score)

    def report(self, verdicts: Iterable[Verdict]) -> list[Hit]:
        hits: list[Hit] = []
        for v in verdicts:
            log.debug("HIT! %s found in redirector %s", v.destination_domain, v.origin_url)
            log.info("%s", v.log_line)
            hits.append(
                Hit(rule_name=self.rule_name, score=self.score, log_line=v.log_line, verdict=v)
            )
        return hits

    def check(self, session: ScanSession) -> list[Hit]:
        """Report everything the session's resolution pass produced."""
        return self.report(session.verdicts)


def total_score(hits: Iterable[Hit]) -> float:
    return sum(h.score for h in hits)


__all__ = ["HitReporter", "total_score"]
