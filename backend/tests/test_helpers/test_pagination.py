"""Tests for pagination clamping, sorting and metadata."""

import pytest

import repositories.db_models as db_models
from helpers.pagination import (
    PageParams,
    build_order_by,
    clamp_limit,
    clamp_page,
    make_page_params,
    pagination_meta,
)


@pytest.mark.parametrize("page, expected", [(None, 1), (0, 1), (-3, 1), (1, 1), (7, 7)])
def test_clamp_page(page, expected):
    assert clamp_page(page) == expected


@pytest.mark.parametrize(
    "limit, expected", [(None, 10), (0, 10), (-5, 10), (25, 25), (100, 100), (500, 100)]
)
def test_clamp_limit(limit, expected):
    assert clamp_limit(limit) == expected


class TestMakePageParams:
    def test_defaults(self):
        params = make_page_params()
        assert params == PageParams(page=1, limit=10, sort_by="createdAt", sort_order="desc")
        assert params.skip == 0

    def test_skip(self):
        assert make_page_params(page=3, limit=20).skip == 40

    def test_unknown_sort_key_falls_back(self):
        params = make_page_params(sort_by="password", sort_order="sideways")
        assert params.sort_by == "createdAt"
        assert params.sort_order == "desc"

    def test_known_sort_key_is_kept(self):
        params = make_page_params(sort_by="name", sort_order="asc")
        assert params.sort_by == "name"
        assert params.sort_order == "asc"


class TestBuildOrderBy:
    def test_default_is_created_at_descending(self):
        clauses = build_order_by(db_models.VetDirectory, make_page_params())
        assert str(clauses[0]) == "vet_directory.created_at DESC"
        assert str(clauses[1]) == "vet_directory.id DESC"

    def test_name_resolves_per_entity(self):
        params = make_page_params(sort_by="name", sort_order="asc")
        clauses = build_order_by(db_models.VetDirectory, params, name_column="hospital")
        assert str(clauses[0]) == "vet_directory.hospital ASC"
        assert str(clauses[1]) == "vet_directory.id ASC"

    def test_missing_column_falls_back_to_default(self):
        params = make_page_params(sort_by="title", sort_order="asc")
        clauses = build_order_by(db_models.VetDirectory, params)
        assert str(clauses[0]) == "vet_directory.created_at DESC"
        assert str(clauses[1]) == "vet_directory.id DESC"


@pytest.mark.parametrize(
    "total, limit, pages", [(0, 10, 0), (1, 10, 1), (10, 10, 1), (11, 10, 2), (250, 100, 3)]
)
def test_pagination_meta(total, limit, pages):
    meta = pagination_meta(1, limit, total)
    assert meta == {"page": 1, "limit": limit, "total": total, "pages": pages}
