"""
Component Schemas Package.

Importing this package registers every component schema into the
global ComponentRegistry.
"""

from flowbuilder.workflow.nodes.base import (
    BaseComponent,
    ComponentRegistry,
    NodeParameter,
    get_component_registry,
    register_component,
)

# Import all component modules to trigger registration
from flowbuilder.workflow.nodes import io_nodes       # noqa: F401
from flowbuilder.workflow.nodes import process_nodes  # noqa: F401
from flowbuilder.workflow.nodes import logic_nodes    # noqa: F401
from flowbuilder.workflow.nodes import raw_nodes      # noqa: F401

__all__ = [
    "BaseComponent",
    "ComponentRegistry",
    "NodeParameter",
    "get_component_registry",
    "register_component",
]
