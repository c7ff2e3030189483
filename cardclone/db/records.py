"""Row validation shared by the table modules."""

from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from cardclone.core.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T", bound=BaseModel)


def parse_row(model: type[T], row: dict[str, Any] | None, table: str) -> T | None:
    """Validate one row, logging and dropping it when malformed."""
    if not row:
        return None
    try:
        return model.model_validate(row)
    except ValidationError as e:
        logger.warning(f"Skipping malformed {table} row: {e.error_count()} errors")
        return None


def parse_rows(model: type[T], rows: list[dict[str, Any]] | None, table: str) -> list[T]:
    """Validate a result set, keeping row order and skipping malformed rows."""
    parsed = []
    for row in rows or []:
        record = parse_row(model, row, table)
        if record is not None:
            parsed.append(record)
    return parsed


def quote_filter_value(value: str) -> str:
    """Quote a value for use inside a PostgREST ``or`` filter string.

    Commas, dots, colons and parentheses are reserved in that syntax, so the
    value is wrapped in double quotes with quotes and backslashes escaped.
    """
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'
