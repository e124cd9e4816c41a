"""
Schema package
"""

from .component_descriptor import ComponentDescriptor, ComponentInfo

__all__ = ["ComponentDescriptor", "ComponentInfo"]
