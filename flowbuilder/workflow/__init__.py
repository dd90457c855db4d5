"""
Workflow Graph Model — what a workflow is and how it is kept.

Architecture:
    workflow_model  — persisted records (Workflow, components, connections)
    editor_model    — live canvas records (nodes, edges, handles)
    node_config     — typed per-component configuration variants
    nodes/          — component schemas: fields, defaults, validation
    converter       — editor graph ⇄ workflow record
    workflow_store  — workflow collection, selection, and request status
"""

from flowbuilder.workflow.workflow_model import (
    EDITOR_NODE_KIND,
    ComponentData,
    Position,
    ValidationResult,
    Workflow,
    WorkflowComponent,
    WorkflowConnection,
    WorkflowGraph,
)
from flowbuilder.workflow.editor_model import EditorEdge, EditorGraph, EditorNode, Handle
from flowbuilder.workflow.node_config import (
    ConditionConfig,
    InputConfig,
    NodeConfig,
    OutputConfig,
    ProcessConfig,
    RawConfig,
    parse_node_config,
)
from flowbuilder.workflow.nodes import (
    BaseComponent,
    ComponentRegistry,
    NodeParameter,
    get_component_registry,
)
from flowbuilder.workflow.converter import to_editor_graph, to_workflow
from flowbuilder.workflow.workflow_store import (
    ActionType,
    WorkflowAction,
    WorkflowState,
    WorkflowStore,
    reduce,
)

__all__ = [
    "EDITOR_NODE_KIND",
    "ComponentData",
    "Position",
    "ValidationResult",
    "Workflow",
    "WorkflowComponent",
    "WorkflowConnection",
    "WorkflowGraph",
    "EditorEdge",
    "EditorGraph",
    "EditorNode",
    "Handle",
    "ConditionConfig",
    "InputConfig",
    "NodeConfig",
    "OutputConfig",
    "ProcessConfig",
    "RawConfig",
    "parse_node_config",
    "BaseComponent",
    "ComponentRegistry",
    "NodeParameter",
    "get_component_registry",
    "to_editor_graph",
    "to_workflow",
    "ActionType",
    "WorkflowAction",
    "WorkflowState",
    "WorkflowStore",
    "reduce",
]
