"""
Process Components — transformation steps between input and output.
"""

from __future__ import annotations

from typing import Any, Dict

from flowbuilder.workflow.nodes.base import (
    BaseComponent,
    NodeParameter,
    options,
    register_component,
)


def _retry_enabled(config: Dict[str, Any]) -> bool:
    return bool(config.get("enableRetry"))


@register_component
class ProcessComponent(BaseComponent):
    """Transform, filter, or aggregate data flowing through the graph.

    ``maxRetries`` only exists while ``enableRetry`` is on; with retry
    off its value (or absence) never affects validity.
    """

    component_type = "process"
    label = "Process"
    description = "Apply processing logic to the data"
    color = "#2563eb"

    parameters = [
        NodeParameter(
            name="processType",
            label="Process Type",
            type="select",
            required=True,
            error_message="Process type is required",
            options=options(
                ("transform", "Transform Data"),
                ("filter", "Filter Data"),
                ("aggregate", "Aggregate Data"),
                ("custom", "Custom Logic"),
            ),
        ),
        NodeParameter(
            name="logic",
            label="Processing Logic",
            type="text",
            required=True,
            error_message="Processing logic is required",
            description="Define the processing logic for this component.",
        ),
        NodeParameter(
            name="critical",
            label="Critical Process",
            type="boolean",
            description="Mark as critical - requires error handling.",
        ),
        NodeParameter(
            name="timeout",
            label="Timeout (seconds)",
            type="number",
            description="Maximum execution time (optional).",
            group="execution",
        ),
        NodeParameter(
            name="enableRetry",
            label="Enable Retry",
            type="boolean",
            description="Retry on failure.",
            group="execution",
        ),
        NodeParameter(
            name="maxRetries",
            label="Max Retries",
            type="number",
            default="3",
            visible_when=_retry_enabled,
            group="execution",
        ),
    ]
