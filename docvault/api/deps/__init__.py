"""API-specific dependencies."""

# Re-export common dependencies
from .dependencies import (
    get_document_service,
    get_ingestion_service,
    get_requester,
    get_scheduler,
    get_service_cache,
    get_session_factory,
    get_settings_dependency,
    get_storage,
    get_user_service,
    require_roles,
)

__all__ = [
    "get_document_service",
    "get_ingestion_service",
    "get_requester",
    "get_scheduler",
    "get_service_cache",
    "get_session_factory",
    "get_settings_dependency",
    "get_storage",
    "get_user_service",
    "require_roles",
]
