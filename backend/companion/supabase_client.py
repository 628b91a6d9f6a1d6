from __future__ import annotations

from supabase import Client, ClientOptions, create_client

from app.logging_utils import get_logger
from companion.settings import CompanionSettings

log = get_logger(__name__)


class SupabaseNotConfigured(RuntimeError):
    def __init__(self) -> None:
        super().__init__(
            "Supabase is not configured. Set SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY."
        )


class SupabaseService:
    """
    Thin holder for a service-role Supabase client.

    Construction fails immediately when either setting is missing. The
    client never refreshes tokens or persists an auth session.
    """

    def __init__(self, settings: CompanionSettings) -> None:
        url = settings.SUPABASE_URL
        service_key = settings.SUPABASE_SERVICE_ROLE_KEY
        if not url or not service_key:
            raise SupabaseNotConfigured()

        self._url = url
        self._client = create_client(
            url,
            service_key,
            options=ClientOptions(auto_refresh_token=False, persist_session=False),
        )
        log.info("supabase client created", extra={"project_url": url})

    def get_client(self) -> Client:
        return self._client

    def get_project_url(self) -> str:
        return self._url
