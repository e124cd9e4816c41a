"""
Health check endpoints
"""

from datetime import datetime
from typing import Any, AsyncGenerator, Dict

from fastapi import APIRouter, Depends

from padma_backend.config.settings import get_settings
from padma_backend.core.exceptions import ExternalServiceError
from padma_backend.services.cms_registry_client import ComponentRegistryClient
from padma_backend.services.registration_service import (
    RegistrationService,
    create_registry_client,
    registration_service,
)

router = APIRouter()
settings = get_settings()


async def get_registry_client() -> AsyncGenerator[ComponentRegistryClient, None]:
    async with create_registry_client() as client:
        yield client


def get_registration_service() -> RegistrationService:
    return registration_service


@router.get("/")
async def health_check() -> Dict[str, str]:
    """Basic health check."""
    return {
        "status": "healthy",
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "timestamp": datetime.utcnow().isoformat(),
    }


@router.get("/ready")
async def readiness_check(
    client: ComponentRegistryClient = Depends(get_registry_client),
    service: RegistrationService = Depends(get_registration_service),
) -> Dict[str, Any]:
    """Readiness check including CMS connectivity and the last registration run."""
    try:
        known = await client.list_components()
        cms_status = "connected"
        known_count = len(known)
    except ExternalServiceError as e:
        cms_status = f"error: {e.message}"
        known_count = None

    last = service.last_result
    return {
        "status": "ready" if cms_status == "connected" else "not ready",
        "cms": cms_status,
        "known_components": known_count,
        "registration": last.model_dump(mode="json") if last else None,
        "timestamp": datetime.utcnow().isoformat(),
    }
