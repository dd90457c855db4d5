"""
Raw Component — schema for any type without a registered schema.

Its whole configuration is one JSON object. Edits that do not parse
are dropped and the last valid object is kept.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from flowbuilder.workflow.node_config import RawConfig
from flowbuilder.workflow.nodes.base import (
    BaseComponent,
    NodeParameter,
    register_fallback,
)


@register_fallback
class RawComponent(BaseComponent):

    component_type = "raw"
    label = "Component"
    description = "Raw JSON configuration for this component"

    parameters = [
        NodeParameter(
            name="config",
            label="Configuration (JSON)",
            type="json",
            description="Raw JSON configuration for this component.",
        ),
    ]

    def visible_parameters(self, config: Optional[Dict[str, Any]] = None):
        return list(self.parameters)

    def apply_defaults(self, config: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        return dict(config or {})

    def validate(self, config: Optional[Dict[str, Any]] = None) -> Dict[str, str]:
        return {}

    def apply_json_edit(self, current: Optional[Dict[str, Any]], text: str) -> Dict[str, Any]:
        """Config after a raw JSON edit; ``current`` when ``text`` is malformed."""
        previous = RawConfig(data=dict(current or {}))
        return RawConfig.from_json(text, previous).to_config()
