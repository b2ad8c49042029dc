"""
Input validation utilities for the ingestion and export entry points.

Provides reusable validation functions for paging parameters, snapshot
identifiers, usernames and file paths handed in by operators.
"""

import re
from uuid import UUID

MAX_PAGE_SIZE = 1000


class ValidationError(ValueError):
    """Raised when input validation fails."""
    pass


def validate_page(page: int, field_name: str = "page") -> int:
    """
    Validate a 1-based page number.

    Raises:
        ValidationError: If page is not a positive integer

    Examples:
        >>> validate_page(1)
        1
        >>> validate_page(0)  # doctest: +SKIP
        ValidationError: page must be a positive integer, got 0
    """
    if isinstance(page, bool) or not isinstance(page, int):
        raise ValidationError(f"{field_name} must be an integer, got {type(page).__name__}")

    if page < 1:
        raise ValidationError(f"{field_name} must be a positive integer, got {page}")

    return page


def validate_limit(limit: int, field_name: str = "limit", max_limit: int = 10000) -> int:
    """
    Validate a limit parameter for queries.

    Args:
        limit: The limit value to validate
        field_name: Name of the field (for error messages)
        max_limit: Maximum allowed limit value

    Returns:
        The validated limit value

    Raises:
        ValidationError: If validation fails

    Examples:
        >>> validate_limit(100)
        100
        >>> validate_limit(0)  # doctest: +SKIP
        ValidationError: limit must be a positive integer
    """
    if isinstance(limit, bool) or not isinstance(limit, int):
        raise ValidationError(f"{field_name} must be an integer, got {type(limit).__name__}")

    if limit <= 0:
        raise ValidationError(f"{field_name} must be a positive integer, got {limit}")

    if limit > max_limit:
        raise ValidationError(f"{field_name} exceeds maximum of {max_limit}")

    return limit


def validate_page_size(page_size: int, field_name: str = "page_size") -> int:
    """Snapshot replay page size, 1..1000."""
    return validate_limit(page_size, field_name=field_name, max_limit=MAX_PAGE_SIZE)


def validate_uuid(value: UUID | str, field_name: str = "id") -> UUID:
    """
    Parse a UUID identifier (snapshot, report).

    Raises:
        ValidationError: If the value is not a UUID
    """
    if isinstance(value, UUID):
        return value

    if not value or not isinstance(value, str):
        raise ValidationError(f"{field_name} must be a non-empty string")

    try:
        return UUID(value.strip())
    except ValueError:
        raise ValidationError(f"{field_name} is not a valid UUID: {value!r}") from None


def validate_snapshot_id(snapshot_id: UUID | str, field_name: str = "snapshot_id") -> UUID:
    return validate_uuid(snapshot_id, field_name)


def validate_username(username: str | None, field_name: str = "username") -> str:
    """
    Validate an operator name; missing names become "unknown".

    Examples:
        >>> validate_username(" ops.jane ")
        'ops.jane'
        >>> validate_username(None)
        'unknown'
    """
    if username is None:
        return "unknown"

    username = str(username).strip()
    if not username:
        return "unknown"

    if not re.match(r'^[a-zA-Z0-9_\-\.@]+$', username):
        raise ValidationError(
            f"{field_name} contains invalid characters. "
            "Only alphanumeric, hyphens, underscores, dots and @ are allowed."
        )

    if len(username) > 255:
        raise ValidationError(f"{field_name} exceeds maximum length of 255 characters")

    return username


def validate_file_path(file_path: str, field_name: str = "file_path") -> str:
    """
    Validate a file path for security.

    Prevents path traversal and ensures the path is reasonable.

    Raises:
        ValidationError: If validation fails

    Examples:
        >>> validate_file_path("/data/contacts.csv")
        '/data/contacts.csv'
        >>> validate_file_path("../../../etc/passwd")  # doctest: +SKIP
        ValidationError: file_path contains path traversal characters
    """
    if not file_path or not isinstance(file_path, str):
        raise ValidationError(f"{field_name} must be a non-empty string")

    file_path = file_path.strip()

    if not file_path:
        raise ValidationError(f"{field_name} cannot be empty or whitespace-only")

    # Prevent path traversal
    if ".." in file_path:
        raise ValidationError(f"{field_name} contains path traversal characters (..)")

    if "\x00" in file_path:
        raise ValidationError(f"{field_name} contains null bytes")

    if len(file_path) > 4096:  # Linux PATH_MAX
        raise ValidationError(f"{field_name} exceeds maximum length of 4096 characters")

    return file_path
