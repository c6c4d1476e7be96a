# shortlink/cli.py
"""
Resolve short URLs from the command line.

Usage:

  shortlink https://bit.ly/abc https://t.co/xyz --redirector bit.ly --redirector t.co
  shortlink -r rules.cf --json https://tinyurl.com/foo
  python -m shortlink --redirector-re '\\.page\\.link$' https://app.page.link/q

Rules come from URL_REDIRECTORS / URL_REDIRECTORS_RE, then --rules files,
then --redirector / --redirector-re flags. Prints the hits and a final
single-line RESULT that scripts can parse.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys

from .config import AppConfig, load_settings
from .exceptions import ConfigError
from .fetch.probe import RedirectProbe
from .resolve.dns_check import dns_available
from .rules import DomainRuleSet, RuleSetBuilder, parse_directives
from .scan.models import Hit, Verdict
from .scan.report import HitReporter, total_score
from .scan.resolver import TinyUrlResolver
from .scan.session import ScanSession


def _section(title: str) -> None:
    print(f"=== {title} ===")


def _build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="shortlink",
        description="Resolve URL-shortener links to their destination domain.",
    )
    ap.add_argument("urls", nargs="+", help="Candidate URLs, e.g. https://bit.ly/abc")
    ap.add_argument(
        "--redirector",
        action="append",
        default=[],
        metavar="DOMAINS",
        help="Space-separated exact redirector domains (repeatable)",
    )
    ap.add_argument(
        "--redirector-re",
        action="append",
        default=[],
        metavar="REGEXES",
        help="Space-separated redirector regexes (repeatable)",
    )
    ap.add_argument(
        "-r",
        "--rules",
        action="append",
        default=[],
        metavar="FILE",
        help="Config file with url_redirector / url_redirector_re lines (repeatable)",
    )
    ap.add_argument("--workers", type=int, default=None, help="Parallel probes (default 1)")
    ap.add_argument("--max-probes", type=int, default=None, help="Probe cap per run")
    ap.add_argument(
        "--dns",
        default=None,
        metavar="MODE",
        help="DNS availability: yes | no | test | test:<names> (default DNS_AVAILABLE)",
    )
    ap.add_argument("--json", action="store_true", help="Emit JSON instead of text")
    ap.add_argument("-v", "--verbose", action="store_true", help="Verbose logging")
    return ap


def _load_rules(
    args: argparse.Namespace, cfg: AppConfig
) -> tuple[DomainRuleSet, list[ConfigError]]:
    builder = RuleSetBuilder()
    for value in cfg.redirectors.url_redirector:
        builder.add_redirectors(value)
    for value in cfg.redirectors.url_redirector_re:
        builder.add_redirector_patterns(value)

    for path in args.rules:
        with open(path, encoding="utf-8") as fh:
            file_rules, file_warnings = parse_directives(fh)
        builder.exact |= file_rules.exact
        builder.patterns.extend(file_rules.patterns)
        builder.warnings.extend(file_warnings)

    for value in args.redirector:
        builder.add_redirectors(value)
    for value in args.redirector_re:
        builder.add_redirector_patterns(value)
    return builder.build(), builder.warnings


def _print_text(verdicts: list[Verdict], hits: list[Hit]) -> None:
    _section("Verdicts")
    if not verdicts:
        print("  (none)")
    for v in verdicts:
        print(f"  {v.origin_url} -> {v.destination_url}")
        print(f"      {v.origin_domain} => {v.destination_domain}")
    print()

    _section("Hits")
    if not hits:
        print("  (none)")
    for h in hits:
        print(f"  {h.rule_name}: {h.log_line}")
    print()


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)

    if not logging.getLogger().handlers:
        logging.basicConfig(
            level=logging.DEBUG if args.verbose else logging.WARNING,
            format="%(levelname)s %(name)s: %(message)s",
        )

    cfg = load_settings()
    try:
        rules, warnings = _load_rules(args, cfg)
    except ConfigError as err:
        print(f"ERROR: {err}", file=sys.stderr)
        return 2
    except OSError as err:
        print(f"ERROR: cannot read rules file: {err}", file=sys.stderr)
        return 2
    for w in warnings:
        print(f"WARNING: {w}", file=sys.stderr)

    mode = args.dns if args.dns is not None else cfg.dns.mode
    max_probes = cfg.scan.max_probes if args.max_probes is None else args.max_probes
    session = ScanSession(dns_available=dns_available(mode), max_probes=max_probes)
    for url in args.urls:
        session.add_uri(url)

    workers = cfg.scan.workers if args.workers is None else args.workers
    with RedirectProbe(
        user_agent=cfg.probe.user_agent,
        timeout_s=cfg.probe.timeout_s,
        trust_env=cfg.probe.trust_env,
    ) as probe:
        resolver = TinyUrlResolver(rules, probe=probe, workers=workers)
        verdicts = resolver.resolve(session)

    hits = HitReporter(cfg.scan.rule_name, cfg.scan.score).check(session)

    if args.json:
        payload = {
            "verdicts": [v.as_dict() for v in verdicts],
            "hits": [{"rule": h.rule_name, "score": h.score, "log": h.log_line} for h in hits],
            "probed": list(session.probed),
            "uris": list(session.uris),
            "dns_available": session.dns_available,
        }
        print(json.dumps(payload, indent=2))
    else:
        _print_text(verdicts, hits)

    print(
        f"RESULT hits={len(hits)} score={total_score(hits):g} "
        f"probed={len(session.probed)} dns={'yes' if session.dns_available else 'no'}",
        file=sys.stderr if args.json else sys.stdout,
    )
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
