'''FastAPI dependencies giving route handlers access to the database client.'''

from typing import Any

from fastapi import Request


def get_db(request: Request) -> Any:
    """Return the Supabase client created once in the application lifespan."""

    return request.app.state.db
