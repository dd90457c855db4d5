"""
flowbuilder — visual workflow graph model, editor session, and service client.
"""

from flowbuilder.errors import (
    APIError,
    FlowBuilderError,
    InvalidConnectionError,
    NodeConfigError,
    UnknownNodeError,
)
from flowbuilder.workflow import (
    Handle,
    ValidationResult,
    Workflow,
    WorkflowStore,
    to_editor_graph,
    to_workflow,
)
from flowbuilder.editor import EditorSession, WorkflowExport
from flowbuilder.auth import AuthSession
from flowbuilder.app import FlowBuilderApp

__version__ = "0.1.0"

__all__ = [
    "APIError",
    "FlowBuilderError",
    "InvalidConnectionError",
    "NodeConfigError",
    "UnknownNodeError",
    "Handle",
    "ValidationResult",
    "Workflow",
    "WorkflowStore",
    "to_editor_graph",
    "to_workflow",
    "EditorSession",
    "WorkflowExport",
    "AuthSession",
    "FlowBuilderApp",
]
