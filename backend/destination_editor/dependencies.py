"""
FastAPI dependency injection setup.

Provides factory functions for service instances used across routes.
"""

from functools import lru_cache

from destination_editor.clients.destination_client import DestinationAPIClient
from destination_editor.config import get_settings
from destination_editor.services.sessions import FormSessionRegistry
from destination_editor.services.validation import FormSchema, build_destination_schema


@lru_cache
def get_destination_client() -> DestinationAPIClient:
    """Get cached destination API client."""
    settings = get_settings()
    return DestinationAPIClient(
        base_url=settings.destination_api_url,
        token=settings.destination_api_token,
        timeout=settings.destination_api_timeout,
    )


@lru_cache
def get_form_schema() -> FormSchema:
    """Get the destination form schema built from settings."""
    return build_destination_schema(get_settings())


@lru_cache
def get_session_registry() -> FormSessionRegistry:
    """Get cached form session registry."""
    settings = get_settings()
    return FormSessionRegistry(
        api=get_destination_client(),
        schema=get_form_schema(),
        max_sessions=settings.max_sessions,
        notification_history=settings.notification_history,
    )
