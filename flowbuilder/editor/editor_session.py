"""
Editor Session — the live, possibly unsaved graph of the current workflow.

The session follows the store's selection: whenever the store's current
workflow changes (a new selection, or the service's response to a save)
the in-memory graph is thrown away and rebuilt from that workflow. Local
edits become durable only through ``save()``.

Usage::

    editor = EditorSession(store)
    store.set_current(workflow)
    src = editor.add_node("input")
    dst = editor.add_node("output")
    editor.connect(src.id, dst.id, Handle.RIGHT, Handle.LEFT)
    await editor.save()
"""

from __future__ import annotations

import random
import re
import time
from logging import getLogger
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union

from pydantic import Field

from flowbuilder.config.client_config import ClientConfig, get_client_config
from flowbuilder.errors import InvalidConnectionError, NodeConfigError, UnknownNodeError
from flowbuilder.workflow.converter import to_editor_graph, to_workflow
from flowbuilder.workflow.editor_model import EditorEdge, EditorNode, Handle
from flowbuilder.workflow.nodes import get_component_registry
from flowbuilder.workflow.nodes.base import ComponentRegistry, is_blank
from flowbuilder.workflow.nodes.raw_nodes import RawComponent
from flowbuilder.workflow.workflow_model import (
    EDITOR_NODE_KIND,
    ComponentData,
    Position,
    ValidationResult,
    WireModel,
    Workflow,
    WorkflowComponent,
    WorkflowConnection,
    WorkflowGraph,
)
from flowbuilder.workflow.workflow_store import WorkflowState, WorkflowStore

logger = getLogger(__name__)

ConfirmCallback = Callable[[str], bool]

CONFIRM_DELETE_NODE = "Delete this node?"
CONFIRM_CLEAR = "Are you sure you want to clear the canvas? This action cannot be undone."

_UNSAFE_FILENAME_CHARS = re.compile(r"[\\/:*?\"<>|\x00-\x1f]")


class WorkflowExport(WireModel):
    """Standalone JSON document of a workflow graph, for download."""

    name: Optional[str] = None
    components: List[WorkflowComponent] = Field(default_factory=list)
    connections: List[WorkflowConnection] = Field(default_factory=list)
    configurations: Optional[Dict[str, Any]] = None

    @property
    def file_name(self) -> str:
        """``{name}.json`` with path separators and unsafe characters replaced."""
        stem = _UNSAFE_FILENAME_CHARS.sub("_", self.name or "").strip(" .")
        return f"{stem or 'workflow'}.json"

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True, exclude_none=True, indent=2)

    def write(self, directory: Union[str, Path]) -> Path:
        """Write to ``directory/<file_name>`` and return the path."""
        path = Path(directory) / self.file_name
        path.write_text(self.to_json(), encoding="utf-8")
        logger.info(f"Workflow exported to {path}")
        return path


def _handle_value(handle: Optional[Union[Handle, str]]) -> Optional[str]:
    if handle is None or handle == "":
        return None
    return Handle(handle).value


class EditorSession:
    """Holds and mutates the canvas graph for the store's current workflow."""

    def __init__(
        self,
        store: WorkflowStore,
        registry: Optional[ComponentRegistry] = None,
        config: Optional[ClientConfig] = None,
        confirm: Optional[ConfirmCallback] = None,
        rng: Optional[random.Random] = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._store = store
        self._registry = registry or get_component_registry()
        self._config = config or get_client_config()
        self._confirm = confirm
        self._rng = rng or random.Random()
        self._clock = clock

        self._workflow: Optional[Workflow] = None
        self._nodes: List[EditorNode] = []
        self._edges: List[EditorEdge] = []
        self.is_dirty = False
        self.validation_result: Optional[ValidationResult] = None

        self.reset(store.current_workflow)
        store.subscribe(self._on_store_change)

    def close(self) -> None:
        """Stop following the store."""
        self._store.unsubscribe(self._on_store_change)

    # ========================================================================
    # Session state
    # ========================================================================

    @property
    def workflow(self) -> Optional[Workflow]:
        return self._workflow

    @property
    def nodes(self) -> List[EditorNode]:
        return list(self._nodes)

    @property
    def edges(self) -> List[EditorEdge]:
        return list(self._edges)

    def get_node(self, node_id: str) -> EditorNode:
        for n in self._nodes:
            if n.id == node_id:
                return n
        raise UnknownNodeError(node_id)

    def _on_store_change(self, state: WorkflowState) -> None:
        if state.current_workflow is not self._workflow:
            self.reset(state.current_workflow)

    def reset(self, workflow: Optional[Workflow]) -> None:
        """Discard the in-memory graph and rebuild it from ``workflow``."""
        if self.is_dirty:
            name = self._workflow.name if self._workflow else None
            logger.warning(f"Discarding unsaved edits to workflow {name!r}")
        self._workflow = workflow
        self._nodes, self._edges = to_editor_graph(workflow)
        self.is_dirty = False
        self.validation_result = None
        logger.debug(
            f"Editor loaded {len(self._nodes)} nodes, {len(self._edges)} edges"
        )

    def _ask(self, prompt: str) -> bool:
        return self._confirm is None or bool(self._confirm(prompt))

    # ========================================================================
    # Mutations
    # ========================================================================

    def _new_node_id(self, component_type: str) -> str:
        stamp = int(self._clock() * 1000)
        taken = {n.id for n in self._nodes}
        while f"{component_type}-{stamp}" in taken:
            stamp += 1
        return f"{component_type}-{stamp}"

    def add_node(self, component_type: str) -> EditorNode:
        """Drop a new node of ``component_type`` at a random canvas position.

        Its label is the component's display name plus a per-type counter.
        """
        schema = self._registry.get(component_type)
        display = schema.label if schema else component_type.capitalize()
        count = sum(1 for n in self._nodes if n.data.type == component_type)
        origin = self._config.canvas_origin
        spread = self._config.canvas_spread

        node = EditorNode(
            id=self._new_node_id(component_type),
            type=EDITOR_NODE_KIND,
            position=Position(
                x=self._rng.random() * spread + origin,
                y=self._rng.random() * spread + origin,
            ),
            data=ComponentData(label=f"{display} {count + 1}", type=component_type, config={}),
        )
        self._nodes.append(node)
        self.is_dirty = True
        return node

    def remove_node(self, node_id: str) -> None:
        """Remove a node and every edge touching it."""
        self.get_node(node_id)
        self._nodes = [n for n in self._nodes if n.id != node_id]
        self._edges = [e for e in self._edges if not e.touches(node_id)]
        self.is_dirty = True

    def delete_node(self, node_id: str) -> bool:
        """Context-menu delete: ``remove_node`` after confirmation."""
        if not self._ask(CONFIRM_DELETE_NODE):
            return False
        self.remove_node(node_id)
        return True

    def move_node(self, node_id: str, x: float, y: float) -> EditorNode:
        node = self.get_node(node_id)
        node.position = Position(x=x, y=y)
        self.is_dirty = True
        return node

    def connect(
        self,
        source: str,
        target: str,
        source_handle: Optional[Union[Handle, str]] = None,
        target_handle: Optional[Union[Handle, str]] = None,
    ) -> EditorEdge:
        """Draw an edge from ``source``'s handle to ``target``'s handle.

        Connecting the same pair of handles twice returns the existing edge.

        Raises:
            InvalidConnectionError: Unknown endpoint, unknown handle, or a
                handle used against its direction.
        """
        known = {n.id for n in self._nodes}
        for node_id in (source, target):
            if node_id not in known:
                raise InvalidConnectionError(f"Unknown node: {node_id}")
        try:
            src_handle = _handle_value(source_handle)
            tgt_handle = _handle_value(target_handle)
        except ValueError as e:
            raise InvalidConnectionError(str(e)) from e
        if src_handle is not None and not Handle(src_handle).is_outgoing:
            raise InvalidConnectionError(f"Handle '{src_handle}' only accepts incoming edges")
        if tgt_handle is not None and not Handle(tgt_handle).is_incoming:
            raise InvalidConnectionError(f"Handle '{tgt_handle}' only emits outgoing edges")

        for edge in self._edges:
            if (edge.source, edge.source_handle, edge.target, edge.target_handle) == (
                source, src_handle, target, tgt_handle,
            ):
                return edge

        edge = EditorEdge(
            id=f"edge-{source}{src_handle or ''}-{target}{tgt_handle or ''}",
            source=source,
            target=target,
            source_handle=src_handle,
            target_handle=tgt_handle,
        )
        self._edges.append(edge)
        self.is_dirty = True
        return edge

    def remove_edge(self, edge_id: str) -> None:
        self._edges = [e for e in self._edges if e.id != edge_id]
        self.is_dirty = True

    # ── Configuration ──

    def node_form(self, node_id: str) -> Dict[str, Any]:
        """Field set and current values for the node's configuration form."""
        node = self.get_node(node_id)
        schema = self._registry.resolve(node.data.type)
        form = schema.to_dict(node.data.config)
        form["nodeLabel"] = node.data.label
        form["values"] = schema.apply_defaults(node.data.config)
        form["typed"] = schema.parse(form["values"])
        return form

    def validate_node(
        self,
        node_id: str,
        config: Optional[Dict[str, Any]] = None,
        label: Optional[str] = None,
    ) -> Dict[str, str]:
        """Field errors for a proposed edit (the node itself is not changed)."""
        node = self.get_node(node_id)
        return self._registry.validate_node(
            node.data.type,
            node.data.label if label is None else label,
            node.data.config if config is None else config,
        )

    def configure_node(
        self,
        node_id: str,
        config: Dict[str, Any],
        label: Optional[str] = None,
    ) -> EditorNode:
        """Replace a node's configuration (and optionally its label).

        Raises:
            NodeConfigError: Field validation failed; the node is unchanged.
        """
        node = self.get_node(node_id)
        errors = self.validate_node(node_id, config, label)
        if errors:
            raise NodeConfigError(errors)
        schema = self._registry.resolve(node.data.type)
        node.data = ComponentData(
            label=node.data.label if label is None else label,
            type=node.data.type,
            config=schema.apply_defaults(config),
        )
        self.is_dirty = True
        return node

    def rename_node(self, node_id: str, label: str) -> EditorNode:
        node = self.get_node(node_id)
        if is_blank(label):
            raise NodeConfigError({"nodeLabel": "Node label is required"})
        node.data = node.data.model_copy(update={"label": label})
        self.is_dirty = True
        return node

    def edit_raw_config(self, node_id: str, text: str) -> bool:
        """Apply a raw JSON edit to a schema-less node.

        Malformed JSON is ignored. Returns True when the edit was applied.
        """
        node = self.get_node(node_id)
        schema = self._registry.resolve(node.data.type)
        if not isinstance(schema, RawComponent):
            raise NodeConfigError({"config": f"'{node.data.type}' nodes are configured field by field"})
        before = dict(node.data.config)
        after = schema.apply_json_edit(before, text)
        if after == before:
            return False
        node.data = node.data.model_copy(update={"config": after})
        self.is_dirty = True
        return True

    def clear(self) -> bool:
        """Empty the canvas after confirmation. Nothing is persisted."""
        if not self._ask(CONFIRM_CLEAR):
            return False
        self._nodes = []
        self._edges = []
        self.is_dirty = True
        return True

    # ========================================================================
    # Explicit requests
    # ========================================================================

    def graph(self) -> WorkflowGraph:
        return to_workflow(self._nodes, self._edges)

    async def save(self) -> Optional[Workflow]:
        """Persist the local graph through the store.

        Returns the service's copy, or None when no workflow is selected.

        Raises:
            APIError: The update failed (also recorded in the store's ``error``).
        """
        workflow = self._workflow
        if workflow is None or workflow.id is None:
            logger.debug("Nothing to save: no persisted workflow selected")
            return None
        updated = await self._store.update(workflow.id, self.graph())
        logger.info(f"Workflow saved: {updated.name} ({updated.id})")
        return updated

    async def validate_current(self) -> Optional[ValidationResult]:
        """Ask the external validator about the local graph, without saving.

        A failed request becomes a single-error result.
        """
        if self._workflow is None:
            return None
        self.validation_result = None
        try:
            result = await self._store.validate(self.graph())
        except Exception as e:
            logger.error(f"Validation request failed: {e}")
            message = getattr(e, "message", None) or str(e) or "Validation request failed"
            result = ValidationResult(valid=False, errors=[message])
        self.validation_result = result
        return result

    def export(self) -> WorkflowExport:
        """The local graph plus workflow metadata as a downloadable document."""
        graph = self.graph()
        workflow = self._workflow
        return WorkflowExport(
            name=workflow.name if workflow else None,
            components=graph.components,
            connections=graph.connections,
            configurations=workflow.configurations if workflow else None,
        )
