from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Accepts camelCase or snake_case input, serializes camelCase."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class PaginationMeta(CamelModel):
    current_page: int
    total_pages: int
    total_items: int
    has_next_page: bool
    has_prev_page: bool


class ErrorDetail(CamelModel):
    field: str | None = None
    message: str


def envelope(message: str, data: Any = None) -> dict[str, Any]:
    """Success envelope: {success, message, data?}."""
    body: dict[str, Any] = {"success": True, "message": message}
    if data is not None:
        body["data"] = data
    return body


def error_envelope(message: str, errors: list[dict] | None = None, error: str | None = None) -> dict[str, Any]:
    body: dict[str, Any] = {"success": False, "message": message}
    if errors:
        body["errors"] = [ErrorDetail(**e).model_dump(by_alias=True) for e in errors]
    if error:
        body["error"] = error
    return body
