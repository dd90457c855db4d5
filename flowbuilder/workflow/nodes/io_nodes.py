"""
I/O Components — where data enters and leaves a workflow.
"""

from __future__ import annotations

from typing import Any, Dict

from flowbuilder.workflow.node_config import FILE_OUTPUT_FORMATS
from flowbuilder.workflow.nodes.base import (
    BaseComponent,
    NodeParameter,
    options,
    register_component,
)


def _is_required_input(config: Dict[str, Any]) -> bool:
    return bool(config.get("required"))


def _format_is(*formats: str):
    def _check(config: Dict[str, Any]) -> bool:
        return config.get("outputFormat") in formats
    return _check


# ============================================================================
# Input
# ============================================================================


@register_component
class InputComponent(BaseComponent):
    """A value supplied to the workflow when it runs."""

    component_type = "input"
    label = "Input"
    description = "Collect a value to feed into the workflow"
    color = "#059669"

    parameters = [
        NodeParameter(
            name="inputType",
            label="Input Type",
            type="select",
            required=True,
            error_message="Input type is required",
            options=options(
                ("text", "Text"),
                ("number", "Number"),
                ("email", "Email"),
                ("password", "Password"),
                ("json", "JSON"),
                ("file", "File"),
            ),
        ),
        NodeParameter(
            name="defaultValue",
            label="Default Value",
            description="Required for required inputs, optional otherwise.",
            required_when=_is_required_input,
            error_message="Default value is required for required inputs",
        ),
        NodeParameter(
            name="required",
            label="Required Field",
            type="boolean",
            description="Mark this input as required for workflow execution.",
        ),
        NodeParameter(
            name="placeholder",
            label="Placeholder Text",
            description="Placeholder text shown to users.",
        ),
        NodeParameter(
            name="helpText",
            label="Help Text",
            type="text",
            description="Additional help text for users.",
        ),
    ]


# ============================================================================
# Output
# ============================================================================


@register_component
class OutputComponent(BaseComponent):
    """Where the workflow's result is delivered.

    File formats need a file name; email and webhook deliveries
    expose their own optional fields.
    """

    component_type = "output"
    label = "Output"
    description = "Deliver the workflow result as a file, message, or webhook call"
    color = "#dc2626"

    parameters = [
        NodeParameter(
            name="outputFormat",
            label="Output Format",
            type="select",
            required=True,
            error_message="Output format is required",
            options=options(
                ("json", "JSON"),
                ("csv", "CSV"),
                ("xml", "XML"),
                ("text", "Plain Text"),
                ("email", "Email"),
                ("webhook", "Webhook"),
            ),
        ),
        NodeParameter(
            name="fileName",
            label="File Name",
            description="Include file extension (e.g., data.json).",
            visible_when=_format_is(*FILE_OUTPUT_FORMATS),
            required_when=_format_is(*FILE_OUTPUT_FORMATS),
            error_message="File name is required for file outputs",
            group="file",
        ),
        NodeParameter(
            name="emailTemplate",
            label="Email Template",
            type="text",
            visible_when=_format_is("email"),
            group="email",
        ),
        NodeParameter(
            name="emailSubject",
            label="Subject Line",
            visible_when=_format_is("email"),
            group="email",
        ),
        NodeParameter(
            name="webhookUrl",
            label="Webhook URL",
            description="HTTP endpoint to send data to.",
            visible_when=_format_is("webhook"),
            group="webhook",
        ),
        NodeParameter(
            name="httpMethod",
            label="HTTP Method",
            type="select",
            default="POST",
            options=options(("POST", "POST"), ("PUT", "PUT"), ("PATCH", "PATCH")),
            visible_when=_format_is("webhook"),
            group="webhook",
        ),
        NodeParameter(
            name="includeTimestamp",
            label="Include Timestamp",
            type="boolean",
            description="Add timestamp to output data.",
        ),
    ]
