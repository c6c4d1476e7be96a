# tests/test_rules.py
from __future__ import annotations

import pytest

from shortlink.config import RedirectorSettings
from shortlink.exceptions import ConfigError
from shortlink.rules import (
    DomainRuleSet,
    RuleSetBuilder,
    compile_pattern,
    load_rules_file,
    parse_directives,
)


def _rules(exact: str = "", regex: str = "") -> DomainRuleSet:
    b = RuleSetBuilder()
    if exact:
        b.add_redirectors(exact)
    if regex:
        b.add_redirector_patterns(regex)
    return b.build()


# ------------------------------------ matching ----------------------------------------


@pytest.mark.parametrize(
    "domain,expected",
    [
        ("bit.ly", True),
        ("BIT.LY", True),
        ("bit.ly.", True),
        ("t.co", True),
        ("example.com", False),
        ("notbit.ly", False),
        ("", False),
    ],
)
def test_exact_match_is_case_insensitive(domain, expected):
    rules = _rules("bit.ly T.CO")
    assert rules.matches(domain) is expected


def test_regex_match_uses_search_in_configuration_order():
    rules = _rules(regex=r"\.page\.link$ ^goo\.gl$")
    assert rules.matches("app.page.link")
    assert rules.matches("goo.gl")
    assert not rules.matches("goo.gl.example.com")
    assert not rules.matches("page.links.example")


def test_exact_or_regex():
    rules = _rules("tiny.example", r"^s\d+\.example$")
    assert rules.matches("tiny.example")
    assert rules.matches("s42.example")
    assert not rules.matches("real.example")


def test_delimited_pattern_with_flags():
    pat = compile_pattern(r"/^BIT\.LY$/i")
    assert pat.search("bit.ly")


def test_empty_rule_set():
    rules = DomainRuleSet()
    assert rules.is_empty
    assert not rules.matches("bit.ly")
    assert not _rules("bit.ly").is_empty
    assert not _rules(regex="x").is_empty


# ------------------------------------ loading -----------------------------------------


@pytest.mark.parametrize("value", ["", "   ", None])
def test_empty_exact_value_is_config_error(value):
    with pytest.raises(ConfigError) as ei:
        RuleSetBuilder().add_redirectors(value)
    assert ei.value.setting == "url_redirector"


@pytest.mark.parametrize("value", ["", "\t", None])
def test_empty_regex_value_is_config_error(value):
    with pytest.raises(ConfigError) as ei:
        RuleSetBuilder().add_redirector_patterns(value)
    assert ei.value.setting == "url_redirector_re"


def test_invalid_regex_warns_and_keeps_other_tokens():
    b = RuleSetBuilder()
    added = b.add_redirector_patterns(r"^ok\.one$ (unclosed ^ok\.two$")
    assert added == 2
    assert len(b.warnings) == 1
    assert "(unclosed" in str(b.warnings[0])
    rules = b.build()
    assert rules.matches("ok.one")
    assert rules.matches("ok.two")


def test_repeated_regex_lines_accumulate():
    b = RuleSetBuilder()
    b.add_redirector_patterns(r"^a\.example$")
    b.add_redirector_patterns(r"^b\.example$")
    rules = b.build()
    assert rules.matches("a.example") and rules.matches("b.example")
    assert [p.pattern for p in rules.patterns] == [r"^a\.example$", r"^b\.example$"]


def test_parse_directives_skips_comments_and_other_settings():
    lines = [
        "# shorteners",
        "",
        "url_redirector bit.ly t.co",
        "score TINY_URL 2.0",
        "url_redirector_re \\.page\\.link$",
        "url_redirector",
        "url_redirector_re [bad",
    ]
    rules, warnings = parse_directives(lines)
    assert rules.exact == frozenset({"bit.ly", "t.co"})
    assert [p.pattern for p in rules.patterns] == [r"\.page\.link$"]
    assert len(warnings) == 2
    assert {w.setting for w in warnings} == {"url_redirector", "url_redirector_re"}


@pytest.mark.parametrize(
    "line,exact,patterns",
    [
        ("url_redirector\tbit.ly", {"bit.ly"}, []),
        ("url_redirector    bit.ly  t.co", {"bit.ly", "t.co"}, []),
        ("url_redirector_re\t^x\\.co$", set(), [r"^x\.co$"]),
        ("  URL_REDIRECTOR \t 7.ly  ", {"7.ly"}, []),
    ],
)
def test_parse_directives_accepts_any_whitespace_separator(line, exact, patterns):
    rules, warnings = parse_directives([line])
    assert warnings == []
    assert rules.exact == frozenset(exact)
    assert [p.pattern for p in rules.patterns] == patterns


def test_load_rules_file(tmp_path):
    cf = tmp_path / "redirectors.cf"
    cf.write_text("url_redirector 2.gp 7.ly\nurl_redirector_re ^x\\.co$\n", encoding="utf-8")
    rules, warnings = load_rules_file(cf)
    assert warnings == []
    assert rules.matches("7.ly")
    assert rules.matches("x.co")


def test_from_settings():
    rules = DomainRuleSet.from_settings(
        RedirectorSettings(url_redirector=["bit.ly"], url_redirector_re=[r"\.gl$"])
    )
    assert rules.matches("bit.ly")
    assert rules.matches("goo.gl")


def test_rule_set_is_immutable():
    rules = _rules("bit.ly")
    with pytest.raises(AttributeError):
        rules.exact = frozenset()  # type: ignore[misc]
