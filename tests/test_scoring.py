from __future__ import annotations

import math

import pytest

from mail_categorizer.config import WeightConfig
from mail_categorizer.schemas import Message
from mail_categorizer.scoring import ScoringEngine, count_occurrences, recency_weight

THREE_PART_BODY = (
    "From: Newest\nSent: 2024-03-03\nwidget\n"
    "From: Middle\nSent: 2024-03-02\nwidget\n"
    "From: Oldest\nSent: 2024-03-01\nwidget\n"
)


@pytest.fixture
def engine(host, reporter, now):
    return ScoringEngine(host=host, reporter=reporter, clock=lambda: now)


def test_count_is_case_insensitive():
    assert count_occurrences("Invoice invoice INVOICE", "invoice") == 3


def test_count_is_non_overlapping():
    assert count_occurrences("aaaa", "aa") == 2
    assert count_occurrences("aaa", "aa") == 1


def test_keyword_is_matched_literally():
    assert count_occurrences("c++ and C++", "c++") == 2
    assert count_occurrences("abc", "a.c") == 0


def test_blank_keyword_never_matches():
    assert count_occurrences("anything", "") == 0
    assert count_occurrences("anything", "   ") == 0


def test_recency_weight_exponents():
    assert [recency_weight(2, i, 3) for i in range(3)] == [4, 2, 1]


def test_subject_contribution_counts_every_occurrence(engine):
    message = Message(id="m1", subject="Invoice invoice INVOICE", body="")
    assert engine.score(message, ["invoice"], WeightConfig(subject_weight=10)) == 30


def test_overlapping_keywords_add_up(engine):
    message = Message(id="m1", subject="invoice", body="")
    assert engine.score(message, ["invoice", "inv"], WeightConfig(subject_weight=10)) == 20


def test_body_recency_weighting(engine):
    message = Message(id="m1", subject="", body=THREE_PART_BODY)
    weights = WeightConfig(body_weight=1, recency_multiplier=2)
    assert engine.score(message, ["widget"], weights) == 7


def test_fractional_multiplier_is_not_rounded(engine):
    body = "From: A\nSent: 2024-01-02\nwidget\nFrom: B\nSent: 2024-01-01\nwidget"
    message = Message(id="m1", subject="", body=body)
    weights = WeightConfig(body_weight=1, recency_multiplier=1.5)
    assert engine.score(message, ["widget"], weights) == pytest.approx(2.5)


def test_subject_and_body_are_summed(engine):
    message = Message(id="m1", subject="Widget order", body="one widget, two widgets")
    weights = WeightConfig(subject_weight=10, body_weight=1)
    assert engine.score(message, ["widget"], weights) == 12


def test_body_failure_keeps_subject_score(engine, host, reporter):
    host.body_failures.add("m1")
    message = Message(id="m1", subject="invoice", body="invoice invoice")
    assert engine.score(message, ["invoice"], WeightConfig()) == 10
    assert any("Error processing email body" in m for m in reporter.messages("error"))


def test_preloaded_segments_skip_the_host(engine, host):
    message = Message(id="m1", subject="", body="invoice")
    segments = engine.load_segments(message)
    host.body_calls.clear()
    engine.score(message, ["invoice"], WeightConfig(), segments=segments)
    engine.score(message, ["bill"], WeightConfig(), segments=segments)
    assert host.body_calls == []


def test_verbose_events_report_match_counts(engine, reporter):
    message = Message(id="m1", subject="invoice", body="")
    engine.score(message, ["invoice"], WeightConfig(), category="Finance")
    verbose = reporter.messages("verbose")
    assert 'Subject match for "invoice": 1 occurrences' in verbose
    assert any(m.startswith('Final score for category "Finance"') for m in verbose)


def test_scores_never_negative(engine):
    message = Message(id="m1", subject="nothing", body="nothing here")
    assert engine.score(message, ["absent"], WeightConfig()) == 0


def test_recency_weight_saturates_instead_of_overflowing():
    assert recency_weight(1e200, 0, 3) == math.inf
    assert recency_weight(1e200, 2, 3) == 1


def test_huge_multiplier_scores_without_nan(engine):
    message = Message(id="m1", subject="", body=THREE_PART_BODY.replace("widget", "gadget", 1))
    weights = WeightConfig.from_mapping({"recency_multiplier": 1e200})
    score = engine.score(message, ["widget"], weights)
    # newest part has no hit, middle part weighs 1e200
    assert score == pytest.approx(1e200 + 1)
