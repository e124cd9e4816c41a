"""
Component Registrar - Reconciles descriptor files with the CMS component registry
Flow: Discovery → Validation → Diff → Registration → Reload / Abort
"""

import asyncio
from collections import deque
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from padma_backend.core.descriptor_provider import DescriptorProvider
from padma_backend.core.exceptions import (
    AlreadyRegisteredError,
    ExternalServiceError,
    MalformedDescriptorError,
    RegistrationError,
)
from padma_backend.core.logging import get_logger
from padma_backend.core.process_supervisor import ProcessSupervisor
from padma_backend.schemas.component_descriptor import ComponentDescriptor
from padma_backend.services.cms_registry_client import ComponentRegistryClient

logger = get_logger(__name__)

RETRY_DETAIL = (
    "Components registration was interrupted due to missing attributes "
    "component or errors. Please retry."
)


class RegistrationPhase(str, Enum):
    """Registrar state machine."""
    DISCOVERING = "discovering"
    VALIDATING = "validating"
    DIFFING = "diffing"
    NO_OP_DONE = "no_op_done"
    REGISTERING = "registering"
    RELOAD_REQUESTED = "reload_requested"
    ABORT_REQUESTED = "abort_requested"


class RegistrationResult(BaseModel):
    """Summary of a single registration run."""
    phase: RegistrationPhase = Field(default=RegistrationPhase.DISCOVERING)
    desired: List[str] = Field(default_factory=list, description="Uids found in the descriptor store")
    pending: List[str] = Field(default_factory=list, description="Uids missing from the CMS")
    registered: List[str] = Field(default_factory=list, description="Uids created this run")
    already_registered: List[str] = Field(default_factory=list, description="Uids the CMS reported as existing")
    failed: Dict[str, str] = Field(default_factory=dict, description="Uid → failure reason")
    reload_requested: bool = Field(default=False)
    abort_message: Optional[str] = Field(default=None)
    started_at: datetime = Field(default_factory=datetime.utcnow)
    finished_at: Optional[datetime] = Field(default=None)


class ComponentRegistrar:
    """
    Registers missing component schemas with the CMS.

    Core Process:
    1. load_desired_components() → read and validate every descriptor
    2. compute_diff() → desired uids the CMS does not know yet
    3. register_pending() → create them one at a time with a throttle
    4. finalize → reload on success, abort when anything failed

    Every run recomputes from scratch, so re-running after a partial
    failure only retries what is still missing.
    """

    def __init__(
        self,
        provider: DescriptorProvider,
        registry_client: ComponentRegistryClient,
        supervisor: ProcessSupervisor,
        delay_seconds: float = 0.5,
        log: Any = None,
    ):
        self.provider = provider
        self.registry_client = registry_client
        self.supervisor = supervisor
        self.delay_seconds = delay_seconds
        self.last_result: Optional[RegistrationResult] = None
        self.logger = (log or logger).bind(registrar="component_registrar")

    async def run(self) -> RegistrationResult:
        """Execute one full registration run."""
        result = RegistrationResult()
        self.last_result = result

        try:
            desired = await self.load_desired_components(result)
        except MalformedDescriptorError as e:
            await self._abort(result, e.message, f"Fix the component descriptor {e.source} and run again.")
            return result
        except OSError as e:
            await self._abort(result, f"Cannot read component descriptors: {e}", RETRY_DETAIL)
            return result

        result.phase = RegistrationPhase.DIFFING
        try:
            known = await self.registry_client.list_components()
        except ExternalServiceError as e:
            await self._abort(result, e.message, RETRY_DETAIL)
            return result

        result.pending = self.compute_diff(desired, known)
        if not result.pending:
            result.phase = RegistrationPhase.NO_OP_DONE
            result.finished_at = datetime.utcnow()
            self.logger.info("All components are already registered", total=len(desired))
            return result

        self._warn_unresolved_references(desired, known, result.pending)

        result.phase = RegistrationPhase.REGISTERING
        await self.register_pending(desired, result)

        if result.failed:
            await self._abort(
                result,
                f"Run again to complete the {len(result.failed)} components registration process.",
                RETRY_DETAIL,
            )
            return result

        result.phase = RegistrationPhase.RELOAD_REQUESTED
        result.reload_requested = True
        result.finished_at = datetime.utcnow()
        if not result.registered:
            self.logger.warning(
                "Reloading although no component was newly created",
                already_registered=result.already_registered,
            )
        self.logger.info("Reloading, new components added", registered=len(result.registered))
        await self.supervisor.reload()
        return result

    async def load_desired_components(
        self, result: Optional[RegistrationResult] = None
    ) -> Dict[str, ComponentDescriptor]:
        """
        Read and validate every descriptor, keyed by uid in discovery order.

        Raises:
            MalformedDescriptorError: on the first invalid descriptor or a duplicate uid
        """
        result = result or RegistrationResult()
        result.phase = RegistrationPhase.DISCOVERING
        raw_descriptors = await self.provider.list_descriptors()

        result.phase = RegistrationPhase.VALIDATING
        desired: Dict[str, ComponentDescriptor] = {}
        sources: Dict[str, str] = {}
        for raw in raw_descriptors:
            descriptor = ComponentDescriptor.from_raw(raw.content, raw.source)
            if descriptor.uid in desired:
                raise MalformedDescriptorError(
                    f"Duplicate component uid {descriptor.uid} in {sources[descriptor.uid]} and {raw.source}",
                    source=raw.source,
                )
            desired[descriptor.uid] = descriptor
            sources[descriptor.uid] = raw.source

        result.desired = list(desired)
        self.logger.info("Descriptors validated", count=len(desired))
        return desired

    @staticmethod
    def compute_diff(desired: Dict[str, ComponentDescriptor], known: Dict[str, Any]) -> List[str]:
        """Desired uids absent from the known set, in discovery order."""
        return [uid for uid in desired if uid not in known]

    async def register_pending(
        self, desired: Dict[str, ComponentDescriptor], result: RegistrationResult
    ) -> None:
        """Create every pending component sequentially, recording outcomes in result."""
        outstanding = deque(result.pending)

        while outstanding:
            uid = outstanding.popleft()
            descriptor = desired[uid]
            try:
                await self.registry_client.create_component(descriptor)
            except AlreadyRegisteredError:
                result.already_registered.append(uid)
                self.logger.info("Component already registered", uid=uid)
            except RegistrationError as e:
                result.failed.setdefault(uid, e.reason)
                self.logger.error("Error registering component", uid=uid, reason=e.reason)
            except Exception as e:
                result.failed.setdefault(uid, str(e))
                self.logger.error("Error registering component", uid=uid, error=str(e), error_type=type(e).__name__)
            else:
                result.registered.append(uid)
                self.logger.info("Component registered successfully", uid=uid)

            await asyncio.sleep(self.delay_seconds)

    def _warn_unresolved_references(
        self,
        desired: Dict[str, ComponentDescriptor],
        known: Dict[str, Any],
        pending: List[str],
    ) -> None:
        for uid in pending:
            missing = sorted(
                ref for ref in desired[uid].referenced_components()
                if ref not in desired and ref not in known
            )
            if missing:
                self.logger.warning("Component references unknown components", uid=uid, missing=missing)

    async def _abort(self, result: RegistrationResult, message: str, detail: str) -> None:
        result.phase = RegistrationPhase.ABORT_REQUESTED
        result.abort_message = message
        result.finished_at = datetime.utcnow()
        self.logger.error("Components registration aborted", message=message, failed=list(result.failed))
        await self.supervisor.abort_with_error(message, detail)
