import pytest

from app.schemas.interaction_schema import PaginationMeta
from app.utils.pagination import normalize, offset, paginate


@pytest.mark.parametrize(
    "page, limit, expected",
    [(1, 20, (1, 20)), (0, 20, (1, 20)), (-3, 5, (1, 5)), (2, 0, (2, 1)), (3, -1, (3, 1))],
)
def test_normalize_floors_at_one(page, limit, expected):
    assert normalize(page, limit) == expected


def test_offset():
    assert offset(1, 20) == 0
    assert offset(3, 10) == 20
    assert offset(0, 10) == 0


@pytest.mark.parametrize(
    "total, limit, total_pages",
    [(0, 10, 0), (1, 10, 1), (10, 10, 1), (11, 10, 2), (3, 2, 2)],
)
def test_total_pages_is_ceiling(total, limit, total_pages):
    meta = paginate(1, limit, total)
    assert meta["total"] == total
    assert meta["total_pages"] == total_pages


def test_page_beyond_last_keeps_requested_page():
    assert paginate(5, 2, 3) == {"page": 5, "limit": 2, "total": 3, "total_pages": 2}


def test_meta_serializes_total_pages_as_camel_case():
    meta = PaginationMeta(**paginate(1, 2, 3))
    assert meta.model_dump(by_alias=True) == {
        "page": 1,
        "limit": 2,
        "total": 3,
        "totalPages": 2,
    }
