"""
Workflow Converter — live editor graph ⇄ persisted workflow record.

``to_workflow`` is applied to every save, validate, and export; the
inverse ``to_editor_graph`` runs whenever the editor (re)loads a
workflow. For any well-formed workflow ``w``::

    to_workflow(*to_editor_graph(w)) == WorkflowGraph(
        components=w.components, connections=w.connections)
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional, Tuple

from flowbuilder.workflow.editor_model import EditorEdge, EditorGraph, EditorNode
from flowbuilder.workflow.workflow_model import (
    EDITOR_NODE_KIND,
    ComponentData,
    Position,
    Workflow,
    WorkflowComponent,
    WorkflowConnection,
    WorkflowGraph,
)


def _plain_style(style: Optional[Any]) -> Dict[str, Any]:
    # Copy into a plain dict; never hand a live style object to persistence.
    if not style:
        return {}
    return {str(k): v for k, v in dict(style).items()}


def node_to_component(node: EditorNode) -> WorkflowComponent:
    data = node.data
    return WorkflowComponent(
        id=node.id,
        type=node.type or EDITOR_NODE_KIND,
        position=Position(x=node.position.x, y=node.position.y),
        data=ComponentData(
            label=data.label or "",
            type=data.type or "",
            config=dict(data.config or {}),
        ),
        style=_plain_style(node.style),
    )


def edge_to_connection(edge: EditorEdge) -> WorkflowConnection:
    return WorkflowConnection(
        id=edge.id,
        source=edge.source,
        target=edge.target,
        source_handle=edge.source_handle or None,
        target_handle=edge.target_handle or None,
    )


def to_workflow(
    nodes: Iterable[EditorNode],
    edges: Iterable[EditorEdge],
) -> WorkflowGraph:
    """Serialize the editor graph into the persisted component/connection shape."""
    return WorkflowGraph(
        components=[node_to_component(n) for n in nodes],
        connections=[edge_to_connection(e) for e in edges],
    )


def component_to_node(component: WorkflowComponent) -> EditorNode:
    # Always tag with the custom node-kind so the canvas draws the custom visual.
    return EditorNode(
        id=component.id,
        type=EDITOR_NODE_KIND,
        position=component.position.model_copy(),
        data=component.data.model_copy(deep=True),
        style=dict(component.style),
    )


def connection_to_edge(connection: WorkflowConnection) -> EditorEdge:
    return EditorEdge(
        id=connection.id,
        source=connection.source,
        target=connection.target,
        source_handle=connection.source_handle,
        target_handle=connection.target_handle,
    )


def to_editor_graph(workflow: Optional[Workflow]) -> Tuple[List[EditorNode], List[EditorEdge]]:
    """Restore the editor graph for ``workflow`` (empty when there is none)."""
    if workflow is None:
        return [], []
    nodes = [component_to_node(c) for c in workflow.components or []]
    edges = [connection_to_edge(c) for c in workflow.connections or []]
    return nodes, edges


def to_editor_model(workflow: Optional[Workflow]) -> EditorGraph:
    nodes, edges = to_editor_graph(workflow)
    return EditorGraph(nodes=nodes, edges=edges)
