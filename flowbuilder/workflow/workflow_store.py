"""
Workflow Store — in-memory cache of the user's persisted workflows.

Holds the workflow collection, the currently selected workflow, and
the loading/error status of the last operation. State is an immutable
``WorkflowState`` snapshot; every change goes through the pure
``reduce`` function, and subscribers receive each new snapshot.

Network calls go through ``WorkflowAPI``. A failed operation never
discards data already held: it records ``error`` and clears
``loading``. ``create``/``update``/``delete`` additionally re-raise
so the immediate caller can react. Responses are applied in the order
they arrive (last response wins); there is no request queue.

Identity boundary: ``clear_all`` wipes every workflow, the selection,
the error, and the per-identity load markers. Responses to requests
issued before a ``clear_all`` are dropped.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from logging import getLogger
from typing import Any, Callable, List, Optional, Set, Tuple, Union

from flowbuilder.api.workflow_api import WorkflowAPI, WorkflowPatch
from flowbuilder.workflow.workflow_model import (
    ValidationResult,
    Workflow,
    WorkflowGraph,
)

logger = getLogger(__name__)


# ============================================================================
# State & reducer
# ============================================================================


class ActionType(str, Enum):
    SET_LOADING = "set_loading"
    SET_ERROR = "set_error"
    SET_WORKFLOWS = "set_workflows"
    ADD_WORKFLOW = "add_workflow"
    UPDATE_WORKFLOW = "update_workflow"
    DELETE_WORKFLOW = "delete_workflow"
    SET_CURRENT_WORKFLOW = "set_current_workflow"
    CLEAR_ERROR = "clear_error"
    CLEAR_ALL_DATA = "clear_all_data"


@dataclass(frozen=True)
class WorkflowAction:
    type: ActionType
    payload: Any = None


class StoreStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    ERROR = "error"


@dataclass(frozen=True)
class WorkflowState:
    workflows: Tuple[Workflow, ...] = ()
    current_workflow: Optional[Workflow] = None
    loading: bool = False
    error: Optional[str] = None

    @property
    def status(self) -> StoreStatus:
        if self.loading:
            return StoreStatus.LOADING
        if self.error:
            return StoreStatus.ERROR
        return StoreStatus.IDLE

    def find(self, workflow_id: str) -> Optional[Workflow]:
        for w in self.workflows:
            if w.id == workflow_id:
                return w
        return None


def reduce(state: WorkflowState, action: WorkflowAction) -> WorkflowState:
    """Apply one action. Pure: returns a new snapshot."""
    kind = action.type
    payload = action.payload

    if kind is ActionType.SET_LOADING:
        return replace(state, loading=bool(payload))

    if kind is ActionType.SET_ERROR:
        return replace(state, error=payload, loading=False)

    if kind is ActionType.SET_WORKFLOWS:
        return replace(state, workflows=tuple(payload), loading=False)

    if kind is ActionType.ADD_WORKFLOW:
        return replace(
            state,
            workflows=(payload,) + state.workflows,
            current_workflow=payload,
            loading=False,
            error=None,
        )

    if kind is ActionType.UPDATE_WORKFLOW:
        current = state.current_workflow
        if current is not None and current.id == payload.id:
            current = payload
        return replace(
            state,
            workflows=tuple(payload if w.id == payload.id else w for w in state.workflows),
            current_workflow=current,
            loading=False,
        )

    if kind is ActionType.DELETE_WORKFLOW:
        current = state.current_workflow
        if current is not None and current.id == payload:
            current = None
        return replace(
            state,
            workflows=tuple(w for w in state.workflows if w.id != payload),
            current_workflow=current,
            loading=False,
        )

    if kind is ActionType.SET_CURRENT_WORKFLOW:
        return replace(state, current_workflow=payload)

    if kind is ActionType.CLEAR_ERROR:
        return replace(state, error=None)

    if kind is ActionType.CLEAR_ALL_DATA:
        return WorkflowState()

    return state


StateListener = Callable[[WorkflowState], None]


def _message(error: Exception, fallback: str) -> str:
    text = getattr(error, "message", None) or str(error)
    return text or fallback


# ============================================================================
# Store
# ============================================================================


class WorkflowStore:
    """Workflow collection + selection + status, kept in sync with the service."""

    def __init__(self, api: WorkflowAPI) -> None:
        self._api = api
        self._state = WorkflowState()
        self._listeners: List[StateListener] = []
        # Per-identity load guard
        self._loaded: Set[str] = set()
        self._in_flight: Set[str] = set()
        # Bumped by clear_all; responses from an older epoch are dropped
        self._epoch = 0

    # ── State access ──

    @property
    def state(self) -> WorkflowState:
        return self._state

    @property
    def workflows(self) -> List[Workflow]:
        return list(self._state.workflows)

    @property
    def current_workflow(self) -> Optional[Workflow]:
        return self._state.current_workflow

    @property
    def loading(self) -> bool:
        return self._state.loading

    @property
    def error(self) -> Optional[str]:
        return self._state.error

    def subscribe(self, listener: StateListener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unsubscribe(self, listener: StateListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def dispatch(self, action: WorkflowAction) -> WorkflowState:
        self._state = reduce(self._state, action)
        for listener in list(self._listeners):
            try:
                listener(self._state)
            except Exception:
                logger.exception(f"Workflow store listener failed on {action.type.value}")
        return self._state

    def _is_stale(self, epoch: int, operation: str) -> bool:
        if epoch != self._epoch:
            logger.info(f"Dropping {operation} response issued before the store was cleared")
            return True
        return False

    # ── Loading ──

    def has_loaded(self, identity: str) -> bool:
        return identity in self._loaded

    def is_loading_for(self, identity: str) -> bool:
        return identity in self._in_flight

    async def load_all(self, identity: Optional[str], force: bool = False) -> bool:
        """Fetch the full collection for ``identity``.

        At most one load per identity is in flight, and an identity
        that already loaded is skipped unless ``force``. Failures are
        recorded in ``error``, not raised; the marker is evicted so a
        later call retries.

        Returns:
            True if a request was issued.
        """
        if not identity:
            logger.debug("Skipping workflow load: no identity")
            return False
        if identity in self._in_flight or (identity in self._loaded and not force):
            logger.debug(f"Skipping workflow load for {identity}: already loaded or in flight")
            return False

        epoch = self._epoch
        self._in_flight.add(identity)
        self._loaded.add(identity)
        self.dispatch(WorkflowAction(ActionType.SET_LOADING, True))
        try:
            workflows = await self._api.get_all()
        except Exception as e:
            # Markers of an older epoch were already dropped by clear_all
            if self._is_stale(epoch, "load"):
                return True
            self._in_flight.discard(identity)
            self._loaded.discard(identity)
            logger.error(f"Failed to load workflows for {identity}: {e}")
            self.dispatch(WorkflowAction(
                ActionType.SET_ERROR, _message(e, "Failed to load workflows"),
            ))
            return True

        if self._is_stale(epoch, "load"):
            return True
        self._in_flight.discard(identity)
        logger.info(f"Loaded {len(workflows)} workflows for {identity}")
        self.dispatch(WorkflowAction(ActionType.SET_WORKFLOWS, workflows))
        return True

    async def get_one(self, workflow_id: str) -> Workflow:
        """Fetch one workflow from the service without touching store state."""
        return await self._api.get_one(workflow_id)

    # ── CRUD ──

    async def create(self, draft: Workflow) -> Workflow:
        """Persist a new workflow, prepend it, and make it current."""
        epoch = self._epoch
        self.dispatch(WorkflowAction(ActionType.SET_LOADING, True))
        try:
            created = await self._api.create(draft)
        except Exception as e:
            logger.error(f"Failed to create workflow '{draft.name}': {e}")
            if not self._is_stale(epoch, "create"):
                self.dispatch(WorkflowAction(
                    ActionType.SET_ERROR, _message(e, "Failed to create workflow"),
                ))
            raise
        if not self._is_stale(epoch, "create"):
            logger.info(f"Workflow created: {created.name} ({created.id})")
            self.dispatch(WorkflowAction(ActionType.ADD_WORKFLOW, created))
        return created

    async def update(
        self,
        workflow_id: str,
        patch: Union[WorkflowPatch, WorkflowGraph],
    ) -> Workflow:
        """Send a partial update; the service's response replaces the held copy."""
        epoch = self._epoch
        self.dispatch(WorkflowAction(ActionType.SET_LOADING, True))
        try:
            updated = await self._api.update(workflow_id, patch)
        except Exception as e:
            logger.error(f"Failed to update workflow {workflow_id}: {e}")
            if not self._is_stale(epoch, "update"):
                self.dispatch(WorkflowAction(
                    ActionType.SET_ERROR, _message(e, "Failed to update workflow"),
                ))
            raise
        if not self._is_stale(epoch, "update"):
            logger.info(f"Workflow updated: {updated.name} ({updated.id})")
            self.dispatch(WorkflowAction(ActionType.UPDATE_WORKFLOW, updated))
        return updated

    async def delete(self, workflow_id: str) -> None:
        """Delete remotely, then drop it locally (and deselect it if current)."""
        epoch = self._epoch
        self.dispatch(WorkflowAction(ActionType.SET_LOADING, True))
        try:
            await self._api.delete(workflow_id)
        except Exception as e:
            logger.error(f"Failed to delete workflow {workflow_id}: {e}")
            if not self._is_stale(epoch, "delete"):
                self.dispatch(WorkflowAction(
                    ActionType.SET_ERROR, _message(e, "Failed to delete workflow"),
                ))
            raise
        if not self._is_stale(epoch, "delete"):
            logger.info(f"Workflow deleted: {workflow_id}")
            self.dispatch(WorkflowAction(ActionType.DELETE_WORKFLOW, workflow_id))

    def set_current(self, workflow: Optional[Workflow]) -> None:
        """Change the selection. Does not fetch."""
        name = workflow.name if workflow is not None else None
        logger.debug(f"Current workflow set to {name!r}")
        self.dispatch(WorkflowAction(ActionType.SET_CURRENT_WORKFLOW, workflow))

    async def validate(self, graph: WorkflowGraph) -> ValidationResult:
        """Ask the external validator about ``graph``. Never touches store state."""
        return await self._api.validate(graph)

    # ── Reset ──

    def clear_error(self) -> None:
        self.dispatch(WorkflowAction(ActionType.CLEAR_ERROR))

    def clear_all(self, *_: Any) -> None:
        """Forget everything held for the previous identity.

        Accepts (and ignores) positional arguments so it can be
        registered directly as an identity-change listener.
        """
        self._epoch += 1
        self._loaded.clear()
        self._in_flight.clear()
        logger.info("Workflow store cleared")
        self.dispatch(WorkflowAction(ActionType.CLEAR_ALL_DATA))
