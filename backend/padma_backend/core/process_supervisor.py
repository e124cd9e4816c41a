"""
Process lifecycle control for the registrar
"""

import os
import sys
from typing import List, Optional, Protocol

from padma_backend.core.exceptions import RegistrationAbortedError
from padma_backend.core.logging import get_logger

logger = get_logger(__name__)


class ProcessSupervisor(Protocol):
    """Reload the serving process or terminate it with an error."""

    async def reload(self) -> None:
        ...

    async def abort_with_error(self, message: str, detail: Optional[str] = None) -> None:
        ...


class LocalProcessSupervisor:
    """
    Supervises the current interpreter process.

    reload() re-executes the process with the same argv so newly created
    schemas are picked up. With exec_on_reload disabled it only logs that a
    restart is required (used by the one-shot CLI).
    """

    def __init__(self, exec_on_reload: bool = True, argv: Optional[List[str]] = None):
        self.exec_on_reload = exec_on_reload
        self.argv = list(argv if argv is not None else sys.argv)
        self.logger = logger.bind(pid=os.getpid())

    async def reload(self) -> None:
        if not self.exec_on_reload:
            self.logger.info("Restart required to load new components")
            return

        self.logger.info("Reloading process", argv=self.argv)
        sys.stdout.flush()
        sys.stderr.flush()
        os.execv(sys.executable, [sys.executable, *self.argv])

    async def abort_with_error(self, message: str, detail: Optional[str] = None) -> None:
        raise RegistrationAbortedError(message, detail)
