"""Base repository with shared Supabase client."""

from supabase._async.client import AsyncClient


class BaseRepository:
    """Base class for all repositories.

    Row-level security in Supabase decides what each call may touch;
    repositories only shape queries and rows.
    """

    def __init__(self, client: AsyncClient) -> None:
        self.client = client
