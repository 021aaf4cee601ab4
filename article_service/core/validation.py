"""Input Validation — guards run by the relational store before any persistence call.

Invariants:
    - require_fields reports every empty field at once, in argument order
    - Pagination requires page >= 1 and page_size >= 1
    - page_size and the derived offset fit a signed 64-bit integer (LIMIT/OFFSET type)
    - Pure functions: raise InvalidArgumentError, never touch IO
"""

from article_service.core.errors import InvalidArgumentError, ErrorContext

MAX_SQL_INT = 2**63 - 1


def require_fields(operation: str, **fields: str | None) -> None:
    """Raise InvalidArgumentError naming every empty field."""
    missing = [name for name, value in fields.items() if not value]
    if missing:
        raise InvalidArgumentError(
            f"{', '.join(fields)} are required" if len(fields) > 1
            else f"{missing[0]} is required",
            fields=missing,
            context=ErrorContext(operation=operation),
        )


def require_page(operation: str, page: int, page_size: int) -> None:
    if page <= 0 or page_size <= 0:
        raise InvalidArgumentError(
            "invalid pagination parameters: page and page_size must be positive",
            fields=[
                name for name, value in (("page", page), ("page_size", page_size))
                if value <= 0
            ],
            context=ErrorContext(operation=operation),
        )
    if page_size > MAX_SQL_INT or page_offset(page, page_size) > MAX_SQL_INT:
        raise InvalidArgumentError(
            "invalid pagination parameters: page is out of range",
            fields=["page", "page_size"],
            context=ErrorContext(operation=operation),
        )


def page_offset(page: int, page_size: int) -> int:
    return (page - 1) * page_size
