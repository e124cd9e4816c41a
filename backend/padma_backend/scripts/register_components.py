"""
Component Registration Script
Registers any component descriptors the CMS does not know yet, then exits.
Safe to re-run: components already registered are skipped.
"""

import asyncio
import sys

from padma_backend.core.exceptions import RegistrationAbortedError
from padma_backend.core.logging import get_logger
from padma_backend.core.process_supervisor import LocalProcessSupervisor
from padma_backend.services.registration_service import RegistrationService

logger = get_logger(__name__)


async def main() -> int:
    """Run one registration pass; the return value is the exit status."""
    service = RegistrationService()
    supervisor = LocalProcessSupervisor(exec_on_reload=False)

    try:
        result = await service.register_components(supervisor=supervisor)
    except RegistrationAbortedError as e:
        logger.error("Registration failed - run this script again", message=e.message, detail=e.detail)
        return 1

    logger.info(
        "Registration finished",
        phase=result.phase.value,
        registered=result.registered,
        already_registered=result.already_registered,
    )
    return 0


def run() -> None:
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    run()
