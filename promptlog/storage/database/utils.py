"""
Database utility functions for common operations.

Provides reusable helpers for:
- Query building
- Result mapping
- Connection string masking
"""

from typing import Any, Dict, List, Mapping
from urllib.parse import urlsplit, urlunsplit


def record_to_dict(record: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Convert an asyncpg Record to dictionary.

    Args:
        record: Database record

    Returns:
        Dictionary with column names as keys
    """
    return dict(record)


def records_to_list(records: List[Mapping[str, Any]]) -> List[Dict[str, Any]]:
    """Convert a list of asyncpg Records to a list of dictionaries."""
    return [record_to_dict(record) for record in records]


def build_insert_query(
    table: str,
    data: Dict[str, Any],
    returning: str = "*",
) -> tuple[str, List[Any]]:
    """
    Build INSERT query with parameterized values.

    Args:
        table: Table name
        data: Dictionary of column: value pairs
        returning: RETURNING clause (default: "*")

    Returns:
        Tuple of (query, values)

    Example:
        query, values = build_insert_query(
            "conversations",
            {"user_message": "hi", "ai_response": "hello"}
        )
    """
    if not data:
        raise ValueError("No data provided")

    columns = list(data.keys())
    values = list(data.values())
    placeholders = [f"${i+1}" for i in range(len(values))]

    query = f"""
        INSERT INTO {table} ({', '.join(columns)})
        VALUES ({', '.join(placeholders)})
        RETURNING {returning}
    """

    return query, values


def mask_database_url(url: str) -> str:
    """Replace the password in a connection string with asterisks."""
    parts = urlsplit(url)
    if not parts.password:
        return url
    netloc = parts.netloc.replace(f":{parts.password}@", ":***@", 1)
    return urlunsplit(parts._replace(netloc=netloc))
