"""
Unit tests for the query composer's pure parts: sort resolution,
pagination arithmetic and date-bound parsing.  No database involved.
"""
from datetime import datetime, timezone

import pytest

from newsportal import errors
from newsportal.config import settings
from newsportal.query import PageRequest, SortField, _parse_bound, resolve_sort
from newsportal.schemas import Language, NewsListOptions


# ---------------------------------------------------------------------------
# Sorting
# ---------------------------------------------------------------------------

def test_resolve_sort_defaults_to_published_at_desc():
    sort = resolve_sort(None, None, "ru")
    assert sort.field is SortField.PUBLISHED_AT
    assert sort.order == "desc"
    assert sort.as_dict() == {"by": "publishedAt", "order": "desc"}


@pytest.mark.parametrize("sort_by", ["views", "id; DROP TABLE news", "", "PUBLISHEDAT"])
def test_resolve_sort_unknown_field_falls_back(sort_by):
    sort = resolve_sort(sort_by, "asc", Language.TM)
    assert sort.field is SortField.PUBLISHED_AT
    assert sort.order == "asc"


def test_resolve_sort_title_follows_requested_language():
    assert resolve_sort("titleTm", "asc", "ru").label == "titleRu"
    assert resolve_sort("title_ru", "asc", "tm").label == "titleTm"
    assert resolve_sort("title", "desc", "tm").as_dict() == {"by": "titleTm", "order": "desc"}


def test_resolve_sort_accepts_snake_case_aliases():
    assert resolve_sort("created_at", "desc", "ru").field is SortField.CREATED_AT
    assert resolve_sort("published_at", "desc", "ru").field is SortField.PUBLISHED_AT


def test_resolve_sort_order_is_case_insensitive_and_defaults_desc():
    assert resolve_sort("createdAt", "ASC", "ru").order == "asc"
    assert resolve_sort("createdAt", "sideways", "ru").order == "desc"


def test_resolve_sort_rejects_unknown_language():
    with pytest.raises(ValueError):
        resolve_sort("title", "asc", "en")


# ---------------------------------------------------------------------------
# Pagination
# ---------------------------------------------------------------------------

def test_page_request_defaults():
    page = PageRequest.build()
    assert page.page == 1
    assert page.limit == settings.DEFAULT_PAGE_SIZE
    assert page.offset == 0


def test_page_request_offset():
    assert PageRequest.build(3, 10).offset == 20


def test_page_request_caps_limit():
    assert PageRequest.build(1, settings.MAX_PAGE_SIZE + 500).limit == settings.MAX_PAGE_SIZE


@pytest.mark.parametrize("page,limit", [(0, 10), (-1, 10), (1, 0), (1, -5)])
def test_page_request_rejects_non_positive(page, limit):
    with pytest.raises(errors.ValidationError):
        PageRequest.build(page, limit)


@pytest.mark.parametrize("total,expected_pages", [(0, 0), (1, 1), (10, 1), (11, 2), (25, 3)])
def test_page_meta_pages_is_ceiling(total, expected_pages):
    meta = PageRequest.build(1, 10).meta(total)
    assert meta == {"page": 1, "limit": 10, "total": total, "pages": expected_pages}


def test_list_options_cap_limit():
    options = NewsListOptions(limit=10_000)
    assert options.limit == settings.MAX_PAGE_SIZE
    assert options.sort_by == "publishedAt"
    assert options.lang is Language.RU


# ---------------------------------------------------------------------------
# Date bounds
# ---------------------------------------------------------------------------

def test_parse_bound_bare_date_covers_whole_day():
    moment, whole_day = _parse_bound("2024-03-10", "endDate")
    assert whole_day is True
    assert moment == datetime(2024, 3, 10, tzinfo=timezone.utc)


def test_parse_bound_compact_date_also_covers_whole_day():
    assert _parse_bound("20240310", "endDate") == (datetime(2024, 3, 10, tzinfo=timezone.utc), True)


def test_parse_bound_naive_datetime_is_utc():
    moment, whole_day = _parse_bound("2024-03-10T15:30:00", "startDate")
    assert whole_day is False
    assert moment == datetime(2024, 3, 10, 15, 30, tzinfo=timezone.utc)


def test_parse_bound_offset_is_normalised_to_utc():
    moment, _ = _parse_bound("2024-03-10T05:00:00+05:00", "startDate")
    assert moment == datetime(2024, 3, 10, 0, 0, tzinfo=timezone.utc)


@pytest.mark.parametrize("value", ["yesterday", "2024-13-01", "10/03/2024"])
def test_parse_bound_rejects_garbage(value):
    with pytest.raises(errors.ValidationError):
        _parse_bound(value, "startDate")
