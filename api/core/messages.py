"""
User-facing response strings.

Placeholders are positional: %1, %2, ...
"""

from __future__ import annotations

MESSAGES: dict[str, str] = {
    "insert_success": "Inserted %1 rows",
    "insert_error": "Error inserting data: ",
    "query_error": "Error executing query: ",
    "route_not_found": "Route not found",
    "server_error": "Internal server error: ",
}


def message(key: str, *args: object) -> str:
    text = MESSAGES[key]
    # Replace from the highest index down so %1 never eats the front of %10.
    for index in range(len(args), 0, -1):
        text = text.replace(f"%{index}", str(args[index - 1]))
    return text
