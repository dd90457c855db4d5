"""
Logic Components — branching on a condition.

A condition node evaluates an expression and labels its two
outgoing branches. Branch labels default to "True" / "False" and
must not be blanked out.
"""

from __future__ import annotations

from flowbuilder.workflow.nodes.base import (
    BaseComponent,
    NodeParameter,
    options,
    register_component,
)


@register_component
class ConditionComponent(BaseComponent):
    """Route execution down one of two branches."""

    component_type = "condition"
    label = "Condition"
    description = "Branch on a condition expression"
    color = "#7c3aed"

    parameters = [
        NodeParameter(
            name="condition",
            label="Condition Logic",
            type="text",
            required=True,
            error_message="Condition logic is required",
            description="A condition expression (e.g., value > 10, status === 'active').",
            group="routing",
        ),
        NodeParameter(
            name="trueBranch",
            label="True Branch Label",
            default="True",
            required=True,
            error_message="True branch label is required",
            group="routing",
        ),
        NodeParameter(
            name="falseBranch",
            label="False Branch Label",
            default="False",
            required=True,
            error_message="False branch label is required",
            group="routing",
        ),
        NodeParameter(
            name="operatorType",
            label="Operator Type",
            type="select",
            default="comparison",
            options=options(
                ("comparison", "Comparison (>, <, ==)"),
                ("logical", "Logical (&&, ||)"),
                ("string", "String (contains, startsWith)"),
                ("custom", "Custom Expression"),
            ),
        ),
        NodeParameter(
            name="description",
            label="Description",
            type="text",
            description="Describe what this condition checks.",
        ),
    ]
