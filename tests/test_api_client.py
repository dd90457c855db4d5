"""Tests for the HTTP boundary: auth header, error mapping, and empty bodies."""

import json

import httpx
import pytest

from flowbuilder.api.client import APIService
from flowbuilder.api.workflow_api import WorkflowAPI, patch_to_wire
from flowbuilder.errors import APIError
from flowbuilder.workflow.workflow_model import Workflow, WorkflowComponent, WorkflowGraph


def _service(config, handler, token=None) -> APIService:
    return APIService(config, transport=httpx.MockTransport(handler), token=token)


@pytest.mark.asyncio
async def test_bearer_token_is_attached_when_held(config):
    seen = []

    def handler(request):
        seen.append(request.headers.get("Authorization"))
        return httpx.Response(200, json=[])

    service = _service(config, handler)
    await service.request("GET", "/workflows")
    service.set_token("abc")
    await service.request("GET", "/workflows")
    service.clear_token()
    await service.request("GET", "/workflows")
    await service.aclose()

    assert seen == [None, "Bearer abc", None]


@pytest.mark.asyncio
async def test_error_uses_service_message(config):
    service = _service(config, lambda r: httpx.Response(404, json={"message": "Workflow not found"}))
    with pytest.raises(APIError) as exc:
        await service.request("GET", "/workflows/nope")
    assert exc.value.message == "Workflow not found"
    assert exc.value.status_code == 404


@pytest.mark.asyncio
async def test_error_without_message_uses_status_text(config):
    service = _service(config, lambda r: httpx.Response(500, text="<html>oops</html>"))
    with pytest.raises(APIError) as exc:
        await service.request("GET", "/workflows")
    assert exc.value.message == "API Error: Internal Server Error"


@pytest.mark.asyncio
async def test_transport_failure_becomes_api_error(config):
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    service = _service(config, handler)
    with pytest.raises(APIError) as exc:
        await service.request("GET", "/workflows")
    assert "connection refused" in exc.value.message
    assert exc.value.status_code is None


@pytest.mark.asyncio
async def test_no_content_returns_none(config):
    service = _service(config, lambda r: httpx.Response(204))
    assert await service.request("DELETE", "/workflows/wf-1") is None


@pytest.mark.asyncio
async def test_create_strips_service_assigned_fields(config):
    bodies = []

    def handler(request):
        body = json.loads(request.content)
        bodies.append(body)
        return httpx.Response(201, json={**body, "id": "wf-9", "createdAt": "t", "updatedAt": "t"})

    api = WorkflowAPI(_service(config, handler))
    created = await api.create(Workflow(id="local", name="ETL", created_at="x"))

    assert "id" not in bodies[0] and "createdAt" not in bodies[0]
    assert bodies[0]["name"] == "ETL"
    assert created.id == "wf-9"
    assert created.created_at == "t"


def test_patch_to_wire_serializes_models():
    graph = WorkflowGraph(components=[WorkflowComponent(id="a")])
    assert patch_to_wire(graph)["components"][0]["id"] == "a"

    patch = {"name": "x", "components": graph.components}
    wire = patch_to_wire(patch)
    assert wire["name"] == "x"
    assert wire["components"][0]["type"] == "customNode"
