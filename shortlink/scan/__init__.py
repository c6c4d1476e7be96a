# shortlink/scan/__init__.py
from __future__ import annotations

from .models import CandidateURL, Hit, Verdict
from .report import HitReporter, total_score
from .resolver import TinyUrlResolver, resolve_candidates
from .session import ProbeBudget, ScanSession

__all__ = [
    "CandidateURL",
    "Verdict",
    "Hit",
    "ScanSession",
    "ProbeBudget",
    "TinyUrlResolver",
    "resolve_candidates",
    "HitReporter",
    "total_score",
]
