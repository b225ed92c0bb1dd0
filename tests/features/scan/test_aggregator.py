"""
Tests for aggregating page results into a ScanResult.
"""
from itertools import permutations

import pytest

from a11y_audit.features.scan.schemas.violation import Impact, PageResult, Principle, Violation
from a11y_audit.features.scan.services.utils.aggregator import (
    aggregate,
    merge_violations,
    single_page_result,
)


def violation(violation_id: str, count: int, impact: Impact = Impact.serious) -> Violation:
    return Violation(
        id=violation_id,
        description=violation_id.title(),
        impact=impact,
        count=count,
        wcag_level="1.1.1 (Level A)",
        principle=Principle.perceivable,
    )


@pytest.fixture
def pages():
    return [
        PageResult(
            url="https://example.com/",
            score=80,
            passed_checks=6,
            violations=[violation("image-alt", 2), violation("keyboard", 1)],
        ),
        PageResult(
            url="https://example.com/about",
            score=91,
            passed_checks=7,
            violations=[violation("keyboard", 3)],
        ),
        PageResult(
            url="https://example.com/contact",
            score=100,
            passed_checks=8,
            violations=[],
        ),
    ]


class TestMergeViolations:
    def test_sums_counts_by_id(self, pages):
        merged = merge_violations(pages)

        assert [(v.id, v.count) for v in merged] == [("image-alt", 2), ("keyboard", 4)]

    def test_inputs_are_not_mutated(self, pages):
        merge_violations(pages)
        assert pages[0].violations[1].count == 1


class TestAggregate:
    def test_totals(self, pages):
        result = aggregate(pages)

        assert result.score == 90  # mean of 80, 91, 100 = 90.33
        assert result.passed_checks == 21
        assert result.issue_count == 6
        assert result.issue_count == sum(page.issue_count for page in pages)
        assert result.is_multi_page is True
        assert result.pages_scanned == [page.url for page in pages]
        assert result.page_results == pages
        assert result.degraded is False

    def test_mean_rounds_half_up(self):
        pages = [
            PageResult(url="https://example.com/a", score=90, passed_checks=8),
            PageResult(url="https://example.com/b", score=91, passed_checks=8),
        ]
        assert aggregate(pages).score == 91

    def test_order_independent(self, pages):
        expected = aggregate(pages)
        expected_counts = {v.id: v.count for v in expected.violations}

        for ordering in permutations(pages):
            result = aggregate(list(ordering))
            assert {v.id: v.count for v in result.violations} == expected_counts
            assert result.score == expected.score
            assert result.passed_checks == expected.passed_checks
            assert result.issue_count == expected.issue_count

    def test_single_page_is_not_multi_page(self, pages):
        result = aggregate(pages[:1])

        assert result.is_multi_page is False
        assert result.pages_scanned == ["https://example.com/"]

    def test_empty_input(self):
        with pytest.raises(ValueError):
            aggregate([])


def test_single_page_result_mirrors_page(pages):
    result = single_page_result(pages[0])

    assert result.score == pages[0].score
    assert result.passed_checks == pages[0].passed_checks
    assert result.violations == pages[0].violations
    assert result.issue_count == pages[0].issue_count
    assert result.pages_scanned == [pages[0].url]
    assert result.page_results == [pages[0]]
    assert result.is_multi_page is False
