"""
Editor Graph Models — the live node/edge state of the canvas.

These mirror what the rendering surface holds: nodes tagged with the
custom node-kind, and edges between named handles. They exist only in
editor memory until converted into a ``Workflow`` and saved.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import Field

from flowbuilder.workflow.workflow_model import (
    EDITOR_NODE_KIND,
    ComponentData,
    Position,
    WireModel,
)


class Handle(str, Enum):
    """The four attachment points of every node.

    Left and top accept incoming edges only; right and bottom
    emit outgoing edges only.
    """
    TOP = "top"
    BOTTOM = "bottom"
    LEFT = "left"
    RIGHT = "right"

    @property
    def is_incoming(self) -> bool:
        return self in (Handle.LEFT, Handle.TOP)

    @property
    def is_outgoing(self) -> bool:
        return self in (Handle.RIGHT, Handle.BOTTOM)


class EditorNode(WireModel):
    """A node on the canvas."""

    id: str
    type: Optional[str] = EDITOR_NODE_KIND
    position: Position = Field(default_factory=Position)
    data: ComponentData = Field(default_factory=ComponentData)
    style: Optional[Dict[str, Any]] = None

    @property
    def component_type(self) -> str:
        return self.data.type


class EditorEdge(WireModel):
    """A drawn edge between two node handles."""

    id: str
    source: str
    target: str
    source_handle: Optional[str] = Field(default=None, alias="sourceHandle")
    target_handle: Optional[str] = Field(default=None, alias="targetHandle")

    def touches(self, node_id: str) -> bool:
        return self.source == node_id or self.target == node_id


class EditorGraph(WireModel):
    nodes: List[EditorNode] = Field(default_factory=list)
    edges: List[EditorEdge] = Field(default_factory=list)
