# tests/test_session.py
from __future__ import annotations

import threading

from shortlink.scan.models import CandidateURL
from shortlink.scan.session import ProbeBudget, ScanSession


def test_budget_counts_down_to_zero():
    b = ProbeBudget(3)
    assert [b.try_acquire() for _ in range(5)] == [True, True, True, False, False]
    assert b.issued == 3
    assert b.remaining == 0


def test_budget_never_negative():
    b = ProbeBudget(-4)
    assert b.limit == 0
    assert not b.try_acquire()


def test_budget_is_shared_safely_between_threads():
    b = ProbeBudget(6)
    granted: list[bool] = []
    lock = threading.Lock()

    def worker():
        for _ in range(10):
            ok = b.try_acquire()
            with lock:
                granted.append(ok)

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert granted.count(True) == 6
    assert b.issued == 6


def test_from_uri_details_accepts_records_and_iterables():
    s = ScanSession.from_uri_details(
        {
            "http://a.example/": {"domains": {"A.example": 1}},
            "http://b.example/": ["b.example", ""],
            "http://c.example/": "c.example",
            "http://d.example/": None,
        },
        dns_available=False,
        max_probes=2,
    )
    assert s.dns_available is False
    assert s.budget.limit == 2
    assert s.candidates() == [
        CandidateURL("http://a.example/", frozenset({"a.example"})),
        CandidateURL("http://b.example/", frozenset({"b.example"})),
        CandidateURL("http://c.example/", frozenset({"c.example"})),
        CandidateURL("http://d.example/", frozenset()),
    ]


def test_add_uri_derives_own_domain_and_merges():
    s = ScanSession()
    first = s.add_uri("https://www.bit.ly/abc")
    assert first.domains == frozenset({"bit.ly"})

    merged = s.add_uri("https://www.bit.ly/abc", ["j.mp"])
    assert merged.domains == frozenset({"bit.ly", "j.mp"})
    assert list(s.uris) == ["https://www.bit.ly/abc"]


def test_sessions_do_not_share_state():
    a, b = ScanSession(), ScanSession()
    a.add_uri("http://tiny.example/x")
    a.budget.try_acquire()
    assert b.uris == {}
    assert b.budget.issued == 0
