"""Tests for issue search value objects."""

from __future__ import annotations

import pytest

from civic_search.domain.search.filter_spec import FilterSpec
from civic_search.domain.search.models import (
    FacetCounts,
    FacetDimension,
    IssueUpdate,
    Location,
    Votes,
    VoteType,
)
from civic_search.domain.search.text import fold_text, searchable_text


class TestVotes:
    def test_overlap_rejected(self):
        with pytest.raises(ValueError):
            Votes(up=frozenset({"u1"}), down=frozenset({"u1"}))

    def test_net(self):
        assert Votes(up=frozenset({"a", "b"}), down=frozenset({"c"})).net == 1

    def test_up_vote_moves_user_out_of_down(self):
        votes = Votes(down=frozenset({"u1"})).cast("u1", VoteType.UP)
        assert votes.up == {"u1"}
        assert votes.down == frozenset()

    def test_down_vote_moves_user_out_of_up(self):
        votes = Votes(up=frozenset({"u1", "u2"})).cast("u1", VoteType.DOWN)
        assert votes.up == {"u2"}
        assert votes.down == {"u1"}

    def test_repeat_vote_is_idempotent(self):
        votes = Votes().cast("u1", VoteType.UP).cast("u1", VoteType.UP)
        assert votes.net == 1


class TestFacetCounts:
    def test_empty_has_all_dimensions(self):
        assert FacetCounts.empty().as_dict() == {
            "categories": {},
            "priorities": {},
            "statuses": {},
            "tags": {},
        }

    def test_for_dimension(self):
        facets = FacetCounts(tags={"flood": 2})
        assert facets.for_dimension(FacetDimension.TAGS) == {"flood": 2}


class TestIssueUpdate:
    def test_only_set_fields_are_changed(self):
        update = IssueUpdate(title="New", location=Location(lat=1, lng=2))
        assert update.changed_fields() == {"title": "New", "location": Location(lat=1, lng=2)}

    def test_empty_update(self):
        assert IssueUpdate().changed_fields() == {}


class TestFilterSpec:
    def test_invalid_window_rejected(self):
        with pytest.raises(ValueError):
            FilterSpec(page=0)
        with pytest.raises(ValueError):
            FilterSpec(limit=101)

    def test_offset(self):
        assert FilterSpec(page=3, limit=10).offset == 20

    def test_with_window_keeps_filters(self):
        spec = FilterSpec(free_text="x", page=4, limit=50).with_window(1, 1)
        assert (spec.free_text, spec.page, spec.limit) == ("x", 1, 1)


class TestTextFolding:
    def test_case_and_diacritics(self):
        assert fold_text("Café ÉCOLE") == "cafe ecole"

    def test_searchable_text_skips_empty_parts(self):
        assert searchable_text("Rue Noël", None, "") == "rue noel"
