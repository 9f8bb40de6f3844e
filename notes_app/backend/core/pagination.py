"""
Pagination Utilities.

Offset-based pagination for list endpoints. Out-of-range or unparseable
values are clamped to safe defaults instead of being rejected.
"""

from dataclasses import dataclass

from fastapi import Query, Request

DEFAULT_LIMIT = 20
MAX_LIMIT = 100


def _to_int(value: object) -> int | None:
    """Best-effort integer parse; None when the value is not numeric."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        value = value.strip()
    try:
        return int(float(value))
    except (TypeError, ValueError, OverflowError):
        return None


def clamp_limit(
    value: object,
    default: int = DEFAULT_LIMIT,
    maximum: int = MAX_LIMIT,
) -> int:
    """
    Clamp a requested page size into [1, maximum].

    Missing, non-numeric, zero and negative values all mean "use the
    default"; anything above the maximum is capped.
    """
    number = _to_int(value)
    if number is None or number <= 0:
        return default
    return min(number, maximum)


def clamp_offset(value: object) -> int:
    """Clamp a requested offset to >= 0; unparseable values become 0."""
    number = _to_int(value)
    if number is None or number < 0:
        return 0
    return number


@dataclass
class PaginationParams:
    """Pagination parameters extracted from query string."""

    limit: int
    offset: int


def get_pagination_params(
    request: Request,
    limit: str | None = Query(
        default=None,
        description="Maximum number of items to return (1-100, default 20)",
    ),
    offset: str | None = Query(
        default=None,
        description="Number of items to skip",
    ),
) -> PaginationParams:
    """
    FastAPI dependency for pagination parameters.

    Bounds come from the pagination section of application.yaml.

    Usage:
        @router.get("/items")
        async def list_items(
            pagination: PaginationParams = Depends(get_pagination_params),
        ):
            ...
    """
    bounds = request.app.state.config.application.pagination
    return PaginationParams(
        limit=clamp_limit(limit, default=bounds.default_limit, maximum=bounds.max_limit),
        offset=clamp_offset(offset),
    )
