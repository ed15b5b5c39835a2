import math
import re

from hireme.core.errors import ValidationError

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


def offset_for(page: int, limit: int) -> int:
    return (page - 1) * limit


def pagination_meta(page: int, limit: int, total: int) -> dict:
    """Pagination block shared by every list endpoint."""
    total_pages = math.ceil(total / limit) if limit > 0 else 0
    return {
        "current_page": page,
        "total_pages": total_pages,
        "total_items": total,
        "has_next_page": page < total_pages,
        "has_prev_page": page > 1,
    }


def parse_sort(sort_by: str | None, allowed: set[str], default: str = "-created_at") -> tuple[str, bool]:
    """
    Parse "field" / "-field" (camelCase or snake_case) into (snake_field, descending).
    Raises ValidationError for fields outside `allowed`.
    """
    raw = (sort_by or "").strip() or default
    descending = raw.startswith("-")
    name = raw.lstrip("-+").strip()
    field = _CAMEL_BOUNDARY.sub("_", name).lower()
    if field not in allowed:
        raise ValidationError(
            f"Cannot sort by '{name}'",
            errors=[{"field": "sortBy", "message": f"Allowed values: {', '.join(sorted(allowed))}"}],
        )
    return field, descending
