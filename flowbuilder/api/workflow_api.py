"""
Workflow endpoints.

Every method returns parsed models; requests carry wire-shaped JSON
(camelCase, unset optionals omitted).
"""

from __future__ import annotations

from typing import Any, Dict, List, Union

from flowbuilder.api.client import APIService
from flowbuilder.workflow.workflow_model import (
    ValidationResult,
    WireModel,
    Workflow,
    WorkflowGraph,
)

WorkflowPatch = Dict[str, Any]


def _wire_value(value: Any) -> Any:
    if isinstance(value, WireModel):
        return value.to_wire()
    if isinstance(value, (list, tuple)):
        return [_wire_value(v) for v in value]
    return value


def patch_to_wire(patch: Union[WorkflowPatch, WorkflowGraph]) -> Dict[str, Any]:
    """Partial update body. Merging into the stored record is the service's job."""
    if isinstance(patch, WireModel):
        return patch.to_wire()
    return {key: _wire_value(value) for key, value in patch.items()}


class WorkflowAPI:

    def __init__(self, service: APIService) -> None:
        self._service = service

    async def get_all(self) -> List[Workflow]:
        body = await self._service.request("GET", "/workflows")
        return [Workflow.model_validate(item) for item in body or []]

    async def get_one(self, workflow_id: str) -> Workflow:
        body = await self._service.request("GET", f"/workflows/{workflow_id}")
        return Workflow.model_validate(body)

    async def create(self, workflow: Workflow) -> Workflow:
        payload = workflow.to_wire()
        # The service assigns identity and timestamps
        for key in ("id", "createdAt", "updatedAt"):
            payload.pop(key, None)
        body = await self._service.request("POST", "/workflows", json=payload)
        return Workflow.model_validate(body)

    async def update(self, workflow_id: str, patch: Union[WorkflowPatch, WorkflowGraph]) -> Workflow:
        body = await self._service.request(
            "PUT", f"/workflows/{workflow_id}", json=patch_to_wire(patch),
        )
        return Workflow.model_validate(body)

    async def delete(self, workflow_id: str) -> None:
        await self._service.request("DELETE", f"/workflows/{workflow_id}")

    async def validate(self, graph: WorkflowGraph) -> ValidationResult:
        body = await self._service.request("POST", "/workflows/validate", json=graph.to_wire())
        return ValidationResult.model_validate(body)
