"""
CMS Registry Client
Talks to the CMS content-type-builder admin API to list and create components
"""

from typing import Any, Dict, Optional, Protocol

import httpx

from padma_backend.core.exceptions import (
    ALREADY_EXISTS_REASON,
    AlreadyRegisteredError,
    ExternalServiceError,
    RegistrationFailureError,
)
from padma_backend.core.logging import get_logger
from padma_backend.schemas.component_descriptor import ComponentDescriptor

logger = get_logger(__name__)

COMPONENTS_PATH = "/content-type-builder/components"


class ComponentRegistryClient(Protocol):
    """Read known components and create new ones."""

    async def list_components(self) -> Dict[str, Dict[str, Any]]:
        ...

    async def create_component(self, descriptor: ComponentDescriptor) -> None:
        ...


class HttpComponentRegistryClient:
    """Component registry backed by the CMS HTTP admin API."""

    service_name = "cms"

    def __init__(
        self,
        base_url: str,
        api_token: Optional[str] = None,
        timeout: float = 30.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        headers = {"Accept": "application/json"}
        if api_token:
            headers["Authorization"] = f"Bearer {api_token}"

        self.base_url = base_url.rstrip("/")
        self._client = client or httpx.AsyncClient(
            base_url=self.base_url,
            headers=headers,
            timeout=timeout,
        )
        if client is not None:
            self._client.headers.update(headers)

    async def __aenter__(self) -> "HttpComponentRegistryClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def list_components(self) -> Dict[str, Dict[str, Any]]:
        """Fetch the components the CMS currently knows, keyed by uid."""
        try:
            response = await self._client.get(COMPONENTS_PATH)
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error("Failed to fetch components from CMS", error=str(e))
            raise ExternalServiceError(
                f"Failed to fetch components from CMS: {e}",
                service_name=self.service_name,
            ) from e

        # Handle different response formats
        if isinstance(data, dict) and "data" in data:
            entries = data["data"]
        elif isinstance(data, list):
            entries = data
        else:
            entries = []

        components = {
            entry["uid"]: entry
            for entry in entries
            if isinstance(entry, dict) and entry.get("uid")
        }
        logger.info("Fetched components from CMS", count=len(components))
        return components

    async def create_component(self, descriptor: ComponentDescriptor) -> None:
        """
        Create one component.

        Raises:
            AlreadyRegisteredError: the CMS reports the uid as existing
            RegistrationFailureError: any other failure
        """
        try:
            response = await self._client.post(
                COMPONENTS_PATH,
                json=descriptor.to_create_payload(),
            )
        except httpx.HTTPError as e:
            raise RegistrationFailureError(descriptor.uid, str(e)) from e

        if response.is_success:
            return

        reason = _error_reason(response)
        if ALREADY_EXISTS_REASON in reason:
            raise AlreadyRegisteredError(descriptor.uid, reason)
        raise RegistrationFailureError(descriptor.uid, reason, status_code=response.status_code)


def _error_reason(response: httpx.Response) -> str:
    """Pull the error message out of a CMS error body."""
    try:
        body = response.json()
    except ValueError:
        return response.text or f"HTTP {response.status_code}"

    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, str):
            return error
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        if body.get("message"):
            return str(body["message"])
    return f"HTTP {response.status_code}"
