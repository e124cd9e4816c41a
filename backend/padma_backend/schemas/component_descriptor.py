"""
Component Descriptor Schemas
Flow: raw JSON bytes → decode → validate required fields → ComponentDescriptor
"""

import json
from typing import Any, Dict, List, Set

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from padma_backend.core.exceptions import MalformedDescriptorError


class ComponentInfo(BaseModel):
    """Display metadata shown in the CMS admin."""
    model_config = ConfigDict(extra="allow")

    display_name: str = Field(..., alias="displayName", min_length=1)
    icon: str = Field(..., min_length=1)


class ComponentDescriptor(BaseModel):
    """A single component schema as stored in the descriptor directory."""
    model_config = ConfigDict(extra="allow", protected_namespaces=())

    uid: str = Field(..., min_length=1, description="Globally unique component key")
    category: str = Field(..., min_length=1, description="Grouping label")
    model_name: str = Field(..., alias="modelName", min_length=1)
    info: ComponentInfo
    attributes: Dict[str, Any] = Field(..., description="Field name → field definition")

    @classmethod
    def from_raw(cls, content: bytes | str, source: str) -> "ComponentDescriptor":
        """
        Decode and validate one descriptor file.

        Raises:
            MalformedDescriptorError: on invalid JSON or missing required fields
        """
        try:
            data = json.loads(content)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise MalformedDescriptorError(
                f"Error parsing file: {source}: {e}",
                source=source,
            ) from e

        if not isinstance(data, dict):
            raise MalformedDescriptorError(
                f"Invalid component structure in file: {source}",
                source=source,
            )

        try:
            return cls.model_validate(data)
        except ValidationError as e:
            missing = sorted({_field_path(err["loc"]) for err in e.errors()})
            raise MalformedDescriptorError(
                f"Invalid component structure in file: {source}",
                source=source,
                missing_fields=missing,
            ) from e

    @property
    def display_name(self) -> str:
        return self.info.display_name

    @property
    def icon(self) -> str:
        return self.info.icon

    def referenced_components(self) -> Set[str]:
        """Uids of other components embedded through attributes."""
        refs: Set[str] = set()
        for definition in self.attributes.values():
            if not isinstance(definition, dict):
                continue
            kind = definition.get("type")
            if kind == "component" and isinstance(definition.get("component"), str):
                refs.add(definition["component"])
            elif kind == "dynamiczone":
                refs.update(c for c in definition.get("components", []) if isinstance(c, str))
        refs.discard(self.uid)
        return refs

    def to_create_payload(self) -> Dict[str, Any]:
        """Body for the CMS create-component call."""
        return {
            "component": {
                "category": self.category,
                "uid": self.uid,
                "modelName": self.model_name,
                "displayName": self.display_name,
                "icon": self.icon,
                "attributes": self.attributes,
            }
        }


def _field_path(loc: List[Any] | tuple) -> str:
    """Render a pydantic error location as a dotted descriptor path."""
    return ".".join(str(part) for part in loc)
