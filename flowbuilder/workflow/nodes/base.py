"""
Component Schema Base — field definitions and the component registry.

Every component kind that can be placed on the canvas (input, process,
output, condition) declares its configuration fields as a list of
``NodeParameter`` objects on a ``BaseComponent`` subclass. The schema
decides three things for a given (possibly partial) config:

* which fields are shown (``visible_parameters``)
* which fields are required right now (``NodeParameter.is_required``)
* which fields are in error (``validate``)

Validation is pure: it never mutates the config it is given and never
touches the network.

Components register themselves with ``@register_component``. Types
without a registered schema resolve to the fallback component, which
accepts arbitrary structured data.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import Any, Callable, Dict, List, Optional, Type

from flowbuilder.workflow.node_config import NodeConfig, parse_node_config

logger = getLogger(__name__)

ConfigPredicate = Callable[[Dict[str, Any]], bool]

DEFAULT_COLOR = "#6b7280"
LABEL_ERROR_KEY = "nodeLabel"


def is_blank(value: Any) -> bool:
    """Missing, empty, or whitespace-only."""
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    return False


def _is_count(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return value >= 0
    if isinstance(value, str):
        return value.strip().isdigit()
    return False


# ============================================================================
# Parameters
# ============================================================================


@dataclass
class NodeParameter:
    """One configurable field of a component.

    ``default`` is the value the form shows when the key is absent;
    it is written into the config on save. ``visible_when`` and
    ``required_when`` make visibility and required-ness depend on
    the rest of the config. A hidden field is never required.
    """

    name: str
    label: str
    type: str = "string"  # string | text | select | boolean | number | json
    default: Any = None
    required: bool = False
    description: str = ""
    options: List[Dict[str, str]] = field(default_factory=list)
    group: str = "general"
    error_message: str = ""
    visible_when: Optional[ConfigPredicate] = None
    required_when: Optional[ConfigPredicate] = None

    def is_visible(self, config: Dict[str, Any]) -> bool:
        return self.visible_when is None or bool(self.visible_when(config))

    def is_required(self, config: Dict[str, Any]) -> bool:
        if not self.is_visible(config):
            return False
        if self.required:
            return True
        return self.required_when is not None and bool(self.required_when(config))

    def missing_message(self) -> str:
        return self.error_message or f"{self.label} is required"

    def to_dict(self, config: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Serialize for a form renderer."""
        config = config or {}
        return {
            "name": self.name,
            "label": self.label,
            "type": self.type,
            "default": self.default,
            "required": self.is_required(config),
            "description": self.description,
            "options": list(self.options),
            "group": self.group,
        }


def options(*pairs: tuple) -> List[Dict[str, str]]:
    """Build select options from ``(value, label)`` pairs."""
    return [{"value": v, "label": lbl} for v, lbl in pairs]


# ============================================================================
# Components
# ============================================================================


class BaseComponent:
    """Schema for one component kind."""

    component_type: str = ""
    label: str = ""
    description: str = ""
    color: str = DEFAULT_COLOR
    parameters: List[NodeParameter] = []

    def visible_parameters(self, config: Optional[Dict[str, Any]] = None) -> List[NodeParameter]:
        """The field set to render for ``config``."""
        merged = self.apply_defaults(config)
        return [p for p in self.parameters if p.is_visible(merged)]

    def apply_defaults(self, config: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Copy of ``config`` with display defaults filled in for absent keys.

        Explicitly blank values are kept as-is so they still fail
        validation.
        """
        merged = dict(config or {})
        for p in self.parameters:
            if p.default is None or merged.get(p.name) is not None:
                continue
            if p.is_visible(merged):
                merged[p.name] = p.default
        return merged

    def validate(self, config: Optional[Dict[str, Any]] = None) -> Dict[str, str]:
        """Map of field name → error message (empty = valid)."""
        merged = self.apply_defaults(config)
        errors: Dict[str, str] = {}
        for p in self.parameters:
            if not p.is_visible(merged):
                continue
            value = merged.get(p.name)
            if is_blank(value):
                if p.is_required(merged):
                    errors[p.name] = p.missing_message()
                continue
            if p.type == "number" and not _is_count(value):
                errors[p.name] = f"{p.label} must be a whole number"
        return errors

    def parse(self, config: Optional[Dict[str, Any]] = None) -> NodeConfig:
        """Typed view of ``config``."""
        return parse_node_config(self.component_type, config)

    def to_dict(self, config: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        merged = self.apply_defaults(config)
        return {
            "type": self.component_type,
            "label": self.label,
            "description": self.description,
            "color": self.color,
            "parameters": [p.to_dict(merged) for p in self.parameters if p.is_visible(merged)],
        }


# ============================================================================
# Registry
# ============================================================================


class ComponentRegistry:
    """Lookup table from component type to its schema."""

    def __init__(self) -> None:
        self._components: Dict[str, BaseComponent] = {}
        self._fallback: Optional[BaseComponent] = None

    def register(self, component: BaseComponent) -> None:
        if not component.component_type:
            raise ValueError(f"{type(component).__name__} has no component_type")
        if component.component_type in self._components:
            logger.warning(f"Component type '{component.component_type}' re-registered")
        self._components[component.component_type] = component

    def set_fallback(self, component: BaseComponent) -> None:
        self._fallback = component

    def get(self, component_type: str) -> Optional[BaseComponent]:
        return self._components.get(component_type)

    def resolve(self, component_type: str) -> BaseComponent:
        """Registered schema for the type, or the fallback schema."""
        component = self._components.get(component_type)
        if component is not None:
            return component
        if self._fallback is None:
            raise LookupError(f"No schema for component type '{component_type}'")
        return self._fallback

    def types(self) -> List[str]:
        return list(self._components)

    def validate_node(
        self,
        component_type: str,
        label: str,
        config: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, str]:
        """Validate a node's label together with its config."""
        errors: Dict[str, str] = {}
        if is_blank(label):
            errors[LABEL_ERROR_KEY] = "Node label is required"
        errors.update(self.resolve(component_type).validate(config))
        return errors


_registry = ComponentRegistry()


def get_component_registry() -> ComponentRegistry:
    """Return the global ComponentRegistry."""
    return _registry


def register_component(cls: Type[BaseComponent]) -> Type[BaseComponent]:
    """Class decorator: instantiate and add to the global registry."""
    _registry.register(cls())
    return cls


def register_fallback(cls: Type[BaseComponent]) -> Type[BaseComponent]:
    """Class decorator: use as the schema for unregistered types."""
    _registry.set_fallback(cls())
    return cls
