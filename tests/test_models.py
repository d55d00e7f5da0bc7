"""Tests for search criteria and payload normalization."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from gamescout.domain.models import GameDetail, GameSummary, SearchCriteria, SearchResultPage


def test_cache_key_is_order_independent():
    first = SearchCriteria(text="zelda", platform_ids=[187, 4], page=2)
    second = SearchCriteria(text="zelda", platform_ids=[4, 187], page=2)

    assert first.cache_key() == second.cache_key()
    assert '"platforms":[4,187]' in first.cache_key()


def test_cache_key_distinguishes_every_field():
    base = SearchCriteria(text="zelda")
    variants = [
        SearchCriteria(text="mario"),
        SearchCriteria(text="zelda", platform_ids=[4]),
        SearchCriteria(text="zelda", ordering="released"),
        SearchCriteria(text="zelda", page=2),
        SearchCriteria(text="zelda", page_size=10),
    ]

    keys = {base.cache_key(), *(variant.cache_key() for variant in variants)}
    assert len(keys) == len(variants) + 1


def test_query_params_skip_empty_values():
    params = SearchCriteria(ordering="-released").query_params()

    assert params == {"ordering": "-released", "page": 1, "page_size": 20}


def test_criteria_rejects_bad_values():
    with pytest.raises(ValidationError):
        SearchCriteria(ordering="name")
    with pytest.raises(ValidationError):
        SearchCriteria(page=0)
    with pytest.raises(ValidationError):
        SearchCriteria(page_size=41)


def test_summary_from_payload_falls_back_to_title():
    game = GameSummary.from_payload({"id": 5, "title": "Fallback", "released": "", "background_image": ""})

    assert game.name == "Fallback"
    assert game.released is None
    assert game.background_image is None


def test_detail_from_payload_ignores_malformed_lists():
    detail = GameDetail.from_payload({"id": 1, "name": "G", "genres": "Action", "publishers": [None, {"name": "P"}]})

    assert detail.genres == ()
    assert detail.publishers == ("P",)


def test_page_has_more_follows_next_link():
    assert SearchResultPage(next="https://rawg.example/api/games?page=2").has_more is True
    assert SearchResultPage(next=None).has_more is False
