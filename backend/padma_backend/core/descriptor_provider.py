"""
Descriptor Provider Module
Flow: Directory scan → Category ordering → File reads → Raw descriptors
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional, Protocol, Sequence

from padma_backend.config.settings import DEFAULT_CATEGORY_ORDER
from padma_backend.core.logging import get_logger

logger = get_logger(__name__)

DESCRIPTOR_SUFFIX = ".json"


@dataclass(frozen=True)
class RawDescriptor:
    """Undecoded descriptor content plus where it came from."""
    source: str
    content: bytes


class DescriptorProvider(Protocol):
    """Anything that can hand the registrar its descriptors in load order."""

    async def list_descriptors(self) -> List[RawDescriptor]:
        ...


class FileSystemDescriptorProvider:
    """
    Reads component descriptors from a directory tree.

    Discovery Process:
    1. _ordered_directories() → category subdirectories, listed ones first
    2. _descriptor_files() → *.json files inside each subdirectory
    3. standalone *.json files at the root come last

    Hidden entries (leading ".") are ignored everywhere.
    """

    def __init__(self, root: str | Path, category_order: Optional[Sequence[str]] = None):
        self.root = Path(root)
        self.category_order = list(category_order or DEFAULT_CATEGORY_ORDER)
        self.logger = logger.bind(root=str(self.root))

    async def list_descriptors(self) -> List[RawDescriptor]:
        if not self.root.is_dir():
            raise FileNotFoundError(f"Components directory does not exist: {self.root}")

        descriptors = []
        for directory in self._ordered_directories():
            files = self._descriptor_files(directory.rglob(f"*{DESCRIPTOR_SUFFIX}"))
            descriptors.extend(self._read(path) for path in files)
            self.logger.debug("Scanned directory", directory=directory.name, files=len(files))

        standalone = self._descriptor_files(self.root.glob(f"*{DESCRIPTOR_SUFFIX}"))
        descriptors.extend(self._read(path) for path in standalone)

        self.logger.info("Descriptors discovered", count=len(descriptors))
        return descriptors

    def _ordered_directories(self) -> List[Path]:
        """Category directories in priority order, unlisted ones alphabetically after."""
        directories = [
            entry for entry in self.root.iterdir()
            if entry.is_dir() and not entry.name.startswith(".")
        ]

        def sort_key(entry: Path):
            if entry.name in self.category_order:
                return (0, self.category_order.index(entry.name), entry.name)
            return (1, 0, entry.name)

        return sorted(directories, key=sort_key)

    def _descriptor_files(self, candidates: Iterable[Path]) -> List[Path]:
        files = []
        for path in candidates:
            relative = path.relative_to(self.root)
            if any(part.startswith(".") for part in relative.parts):
                continue
            if path.is_file():
                files.append(path)
        return sorted(files)

    def _read(self, path: Path) -> RawDescriptor:
        return RawDescriptor(source=str(path), content=path.read_bytes())


class InMemoryDescriptorProvider:
    """Serves descriptors handed in by the caller, in the given order."""

    def __init__(self, descriptors: Iterable[RawDescriptor]):
        self._descriptors = list(descriptors)

    async def list_descriptors(self) -> List[RawDescriptor]:
        return list(self._descriptors)
