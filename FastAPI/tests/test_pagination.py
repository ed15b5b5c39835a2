import pytest

from hireme.core.errors import ValidationError
from hireme.core.pagination import offset_for, pagination_meta, parse_sort


def test_pagination_meta_middle_page():
    assert pagination_meta(2, 10, 35) == {
        "current_page": 2,
        "total_pages": 4,
        "total_items": 35,
        "has_next_page": True,
        "has_prev_page": True,
    }


def test_pagination_meta_empty():
    meta = pagination_meta(1, 10, 0)
    assert meta["total_pages"] == 0
    assert meta["has_next_page"] is False
    assert meta["has_prev_page"] is False


def test_offset_for():
    assert offset_for(1, 10) == 0
    assert offset_for(3, 20) == 40


@pytest.mark.parametrize(
    "raw,expected",
    [
        (None, ("created_at", True)),
        ("", ("created_at", True)),
        ("-createdAt", ("created_at", True)),
        ("salaryMin", ("salary_min", False)),
        ("views_count", ("views_count", False)),
        ("+title", ("title", False)),
    ],
)
def test_parse_sort(raw, expected):
    allowed = {"created_at", "salary_min", "views_count", "title"}
    assert parse_sort(raw, allowed) == expected


def test_parse_sort_rejects_unknown_field():
    with pytest.raises(ValidationError) as ex:
        parse_sort("-passwordHash", {"created_at"})
    assert ex.value.errors[0]["field"] == "sortBy"
