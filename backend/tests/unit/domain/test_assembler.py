"""Tests for SearchResult assembly."""

from __future__ import annotations

from civic_search.domain.common.query import PageSpec
from civic_search.domain.search.assembler import assemble_result
from civic_search.domain.search.models import FacetCounts
from tests.unit.conftest import make_issues_by_day


def test_empty_match_shape():
    result = assemble_result([], 0, None, PageSpec(1, 10))
    assert result.issues == ()
    assert result.total == 0
    assert result.facets == FacetCounts.empty()


def test_total_independent_of_page():
    issues = make_issues_by_day(5)
    facets = FacetCounts(categories={"infrastructure": 42})
    result = assemble_result(issues, 42, facets, PageSpec(3, 5))
    assert result.total == 42
    assert len(result.issues) == 5
    assert result.facets is facets
    assert (result.page, result.limit) == (3, 5)


def test_never_more_issues_than_limit():
    result = assemble_result(make_issues_by_day(8), 8, FacetCounts.empty(), PageSpec(1, 3))
    assert len(result.issues) == 3


def test_missing_facets_become_empty_maps():
    result = assemble_result(make_issues_by_day(1), 1, None, PageSpec(1, 10))
    assert result.facets.as_dict()["tags"] == {}
