'''
This file contains the database configuration for the Hotel Inventory service.
'''

from typing import Any, Optional
from supabase import create_client, Client
import os
from dotenv import load_dotenv

# Postgres SQLSTATE codes surfaced by PostgREST
UNIQUE_VIOLATION = "23505"
CHECK_VIOLATION = "23514"
FOREIGN_KEY_VIOLATION = "23503"

class InventoryDB:
    """Database Client"""

    # private interface
    def __init__(self):
        load_dotenv()
        url: Optional[str] = os.environ.get("SUPABASE_URL")
        key: Optional[str] = os.environ.get("SUPABASE_KEY")
        if url is None or key is None:
            raise ValueError("Database URL or Key not found in environment variables.")
        self.client: Client = create_client(url, key)


def is_unique_violation(error: Exception) -> bool:
    """
    Determine whether an API error represents a uniqueness constraint violation.

    Args:
        error: Exception raised by the persistence layer.

    Returns:
        True if the error indicates a duplicate/unique constraint conflict.
    """

    if getattr(error, "code", None) == UNIQUE_VIOLATION:
        return True

    status_code_value: Any = getattr(error, "status_code", None)
    if str(status_code_value) == "409":
        return True

    message = str(error).lower()
    return "duplicate key value" in message or "unique constraint" in message


def is_check_violation(error: Exception) -> bool:
    """True if the error was raised by a check constraint or the capacity trigger."""

    if getattr(error, "code", None) == CHECK_VIOLATION:
        return True
    return "check constraint" in str(error).lower()


def is_foreign_key_violation(error: Exception) -> bool:
    """True if the error reports a dangling hotel_id."""

    if getattr(error, "code", None) == FOREIGN_KEY_VIOLATION:
        return True
    return "foreign key constraint" in str(error).lower()
