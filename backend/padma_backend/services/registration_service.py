"""
Registration Service
Builds the component registrar from settings and keeps the last run's result
"""

from typing import Optional

from padma_backend.config.settings import Settings, get_settings
from padma_backend.core.component_registrar import ComponentRegistrar, RegistrationResult
from padma_backend.core.descriptor_provider import FileSystemDescriptorProvider
from padma_backend.core.logging import get_logger
from padma_backend.core.process_supervisor import LocalProcessSupervisor, ProcessSupervisor
from padma_backend.services.cms_registry_client import (
    ComponentRegistryClient,
    HttpComponentRegistryClient,
)

logger = get_logger(__name__)


def create_registry_client(settings: Optional[Settings] = None) -> HttpComponentRegistryClient:
    settings = settings or get_settings()
    return HttpComponentRegistryClient(
        base_url=settings.CMS_URL,
        api_token=settings.CMS_API_TOKEN,
        timeout=settings.CMS_REQUEST_TIMEOUT,
    )


class RegistrationService:
    """Runs component registration and remembers the outcome for health checks."""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self.last_result: Optional[RegistrationResult] = None

    def build_registrar(
        self,
        registry_client: ComponentRegistryClient,
        supervisor: Optional[ProcessSupervisor] = None,
    ) -> ComponentRegistrar:
        provider = FileSystemDescriptorProvider(
            self.settings.COMPONENTS_DIR,
            category_order=self.settings.COMPONENT_CATEGORY_ORDER,
        )
        supervisor = supervisor or LocalProcessSupervisor(
            exec_on_reload=self.settings.RELOAD_ON_REGISTRATION
        )
        return ComponentRegistrar(
            provider=provider,
            registry_client=registry_client,
            supervisor=supervisor,
            delay_seconds=self.settings.REGISTRATION_DELAY_SECONDS,
        )

    async def register_components(
        self,
        registry_client: Optional[ComponentRegistryClient] = None,
        supervisor: Optional[ProcessSupervisor] = None,
    ) -> RegistrationResult:
        """Run one registration pass against the configured CMS."""
        logger.info(
            "Starting component registration",
            components_dir=self.settings.COMPONENTS_DIR,
            cms_url=self.settings.CMS_URL,
        )

        if registry_client is not None:
            return await self._run(self.build_registrar(registry_client, supervisor))

        async with create_registry_client(self.settings) as client:
            return await self._run(self.build_registrar(client, supervisor))

    async def _run(self, registrar: ComponentRegistrar) -> RegistrationResult:
        try:
            return await registrar.run()
        finally:
            # Kept even when the supervisor aborts the run
            self.last_result = registrar.last_result


registration_service = RegistrationService()
