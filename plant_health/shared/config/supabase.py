"""
Supabase client configuration for the storage service.
Builds the server-side client used to upload plant photos to Supabase Storage.
"""

import logging

from supabase import Client, ClientOptions, create_client

from .settings import Settings

logger = logging.getLogger(__name__)


def create_supabase_client(settings: Settings) -> Client:
    """
    Create a Supabase client authenticated with the service role key.

    The service role key lets the API write into owner-namespaced folders of the
    plant image bucket on the user's behalf. The client is created once per
    application instance by the lifespan and kept on ``app.state``.

    Args:
        settings: Application settings

    Returns:
        Configured Supabase client

    Raises:
        ConnectionError: If the client cannot be created
    """
    try:
        client = create_client(
            settings.SUPABASE_URL,
            settings.SUPABASE_SERVICE_ROLE_KEY,
            options=ClientOptions(
                headers={"User-Agent": f"PlantHealthAPI/{settings.APP_VERSION}"},
                storage_client_timeout=settings.STORAGE_TIMEOUT_SECONDS,
                auto_refresh_token=False,
                persist_session=False,
            ),
        )
        logger.info("Supabase client initialized successfully")
        return client

    except Exception as e:
        logger.error(f"Failed to initialize Supabase client: {e}")
        raise ConnectionError(f"Supabase initialization failed: {e}") from e
