"""
Pytest configuration and shared test utilities for the component registrar.
"""

import json
from typing import Any, Callable, Dict, List, Optional, Tuple

import pytest

from padma_backend.core.descriptor_provider import InMemoryDescriptorProvider, RawDescriptor
from padma_backend.schemas.component_descriptor import ComponentDescriptor


def make_descriptor(uid: str, **overrides: Any) -> Dict[str, Any]:
    """Build a valid descriptor dict; category and model name derive from the uid."""
    category, _, model_name = uid.partition(".")
    descriptor = {
        "uid": uid,
        "category": category,
        "modelName": model_name,
        "info": {"displayName": model_name.title(), "icon": "cube"},
        "attributes": {"title": {"type": "string"}},
    }
    descriptor.update(overrides)
    return descriptor


def raw_descriptor(descriptor: Dict[str, Any], source: Optional[str] = None) -> RawDescriptor:
    source = source or f"{descriptor.get('uid', 'unknown')}.json"
    return RawDescriptor(source=source, content=json.dumps(descriptor).encode("utf-8"))


def in_memory_provider(*descriptors: Dict[str, Any]) -> InMemoryDescriptorProvider:
    return InMemoryDescriptorProvider(raw_descriptor(d) for d in descriptors)


class FakeRegistryClient:
    """In-memory CMS registry recording every create call."""

    def __init__(self, known: Optional[Dict[str, Dict[str, Any]]] = None):
        self.known: Dict[str, Dict[str, Any]] = dict(known or {})
        self.create_calls: List[str] = []
        self.list_calls = 0
        self.failures: Dict[str, Callable[[str], Exception]] = {}
        self.list_error: Optional[Exception] = None

    def fail_with(self, uid: str, factory: Callable[[str], Exception]) -> None:
        self.failures[uid] = factory

    async def list_components(self) -> Dict[str, Dict[str, Any]]:
        self.list_calls += 1
        if self.list_error is not None:
            raise self.list_error
        return dict(self.known)

    async def create_component(self, descriptor: ComponentDescriptor) -> None:
        self.create_calls.append(descriptor.uid)
        if descriptor.uid in self.failures:
            raise self.failures[descriptor.uid](descriptor.uid)
        self.known[descriptor.uid] = descriptor.to_create_payload()["component"]


class FakeSupervisor:
    """Records reload and abort requests instead of touching the process."""

    def __init__(self):
        self.reloads = 0
        self.aborts: List[Tuple[str, Optional[str]]] = []

    async def reload(self) -> None:
        self.reloads += 1

    async def abort_with_error(self, message: str, detail: Optional[str] = None) -> None:
        self.aborts.append((message, detail))


@pytest.fixture
def registry_client() -> FakeRegistryClient:
    return FakeRegistryClient()


@pytest.fixture
def supervisor() -> FakeSupervisor:
    return FakeSupervisor()
