# tests/conftest.py
import asyncio
import json
import re
from itertools import count
from typing import Any, Dict, List, Optional

import httpx
import pytest

from flowbuilder.api.workflow_api import patch_to_wire
from flowbuilder.app import FlowBuilderApp
from flowbuilder.config.client_config import ClientConfig
from flowbuilder.errors import APIError
from flowbuilder.workflow.workflow_model import ValidationResult, Workflow
from flowbuilder.workflow.workflow_store import WorkflowStore

BASE_URL = "http://flowbuilder.test"
FILE_FORMATS = ("csv", "json", "xml")


# ============================================================================
# In-memory persistence/validation service
# ============================================================================


class FakeService:
    """Stand-in for the remote service, served through httpx.MockTransport."""

    def __init__(self) -> None:
        self.users: Dict[str, Dict[str, Any]] = {}      # email -> {password, user}
        self.tokens: Dict[str, str] = {}                # token -> user id
        self.workflows: Dict[str, Dict[str, Any]] = {}  # id -> record (+ owner)
        self.requests: List[httpx.Request] = []
        self._ids = count(1)

    # ── Helpers ──

    def add_user(self, email: str, password: str = "secret") -> Dict[str, Any]:
        user = {"id": f"user-{next(self._ids)}", "email": email, "role": "user"}
        self.users[email] = {"password": password, "user": user}
        return user

    def issue_token(self, user: Dict[str, Any]) -> str:
        token = f"token-{user['id']}-{next(self._ids)}"
        self.tokens[token] = user["id"]
        return token

    def seed_workflow(self, owner_id: str, name: str, **fields: Any) -> Dict[str, Any]:
        wid = f"wf-{next(self._ids)}"
        record = {
            "id": wid,
            "name": name,
            "description": fields.get("description", ""),
            "components": fields.get("components", []),
            "connections": fields.get("connections", []),
            "configurations": fields.get("configurations", {}),
            "createdAt": "2026-01-01T00:00:00Z",
            "updatedAt": "2026-01-01T00:00:00Z",
            "owner": owner_id,
        }
        self.workflows[wid] = record
        return record

    @staticmethod
    def _public(record: Dict[str, Any]) -> Dict[str, Any]:
        return {k: v for k, v in record.items() if k != "owner"}

    def _current_user(self, request: httpx.Request) -> Optional[str]:
        header = request.headers.get("Authorization", "")
        if not header.startswith("Bearer "):
            return None
        return self.tokens.get(header[len("Bearer "):])

    @staticmethod
    def validate_graph(body: Dict[str, Any]) -> Dict[str, Any]:
        errors: List[str] = []
        components = body.get("components", [])
        ids = {c["id"] for c in components}
        if not components:
            errors.append("Workflow must contain at least one component")
        for comp in components:
            data = comp.get("data", {})
            config = data.get("config", {})
            if data.get("type") == "output" and config.get("outputFormat") in FILE_FORMATS:
                if not config.get("fileName"):
                    errors.append(f"Output '{data.get('label')}': fileName is required for file outputs")
        for conn in body.get("connections", []):
            if conn["source"] not in ids or conn["target"] not in ids:
                errors.append(f"Connection {conn['id']} references a missing component")
        connected = {c["source"] for c in body.get("connections", [])} | {
            c["target"] for c in body.get("connections", [])
        }
        for comp in components:
            if comp["id"] not in connected and len(components) > 1:
                errors.append(f"⚠️ Component '{comp['data'].get('label')}' is not connected")
        hard = [e for e in errors if not e.startswith("⚠️")]
        return {"valid": not hard, "errors": errors}

    # ── Transport handler ──

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        method, path = request.method, request.url.path
        body = json.loads(request.content) if request.content else None

        if path in ("/auth/login", "/auth/register") and method == "POST":
            entry = self.users.get(body["email"])
            if path == "/auth/register":
                if entry is not None:
                    return httpx.Response(409, json={"message": "User already exists"})
                user = self.add_user(body["email"], body["password"])
            else:
                if entry is None or entry["password"] != body["password"]:
                    return httpx.Response(401, json={"message": "Invalid credentials"})
                user = entry["user"]
            return httpx.Response(200, json={"access_token": self.issue_token(user), "user": user})

        user_id = self._current_user(request)
        if path == "/auth/verify":
            if user_id is None:
                return httpx.Response(401, json={"message": "Invalid token"})
            user = next(e["user"] for e in self.users.values() if e["user"]["id"] == user_id)
            return httpx.Response(200, json={"valid": True, "user": user})

        if user_id is None:
            return httpx.Response(401, json={"message": "Unauthorized"})

        if path == "/workflows/validate" and method == "POST":
            return httpx.Response(200, json=self.validate_graph(body))

        if path == "/workflows":
            if method == "GET":
                mine = [self._public(w) for w in self.workflows.values() if w["owner"] == user_id]
                return httpx.Response(200, json=mine)
            if method == "POST":
                fields = {k: v for k, v in body.items() if k != "name"}
                record = self.seed_workflow(user_id, body["name"], **fields)
                return httpx.Response(201, json=self._public(record))

        match = re.fullmatch(r"/workflows/([^/]+)", path)
        if match:
            record = self.workflows.get(match.group(1))
            if record is None or record["owner"] != user_id:
                return httpx.Response(404, json={"message": "Workflow not found"})
            if method == "GET":
                return httpx.Response(200, json=self._public(record))
            if method == "PUT":
                record.update(body)
                record["updatedAt"] = "2026-01-02T00:00:00Z"
                return httpx.Response(200, json=self._public(record))
            if method == "DELETE":
                del self.workflows[record["id"]]
                return httpx.Response(204)

        return httpx.Response(404, json={"message": "Not Found"})


# ============================================================================
# Fake WorkflowAPI for store-level tests
# ============================================================================


class FakeWorkflowAPI:
    """Records calls; each method can be made to fail via ``fail``."""

    def __init__(self, workflows: Optional[List[Workflow]] = None) -> None:
        self.workflows: List[Workflow] = list(workflows or [])
        self.calls: List[tuple] = []
        self.fail: Dict[str, Exception] = {}
        self.validation = ValidationResult(valid=True, errors=[])
        self._ids = count(100)

    def _check(self, name: str) -> None:
        if name in self.fail:
            raise self.fail[name]

    async def get_all(self) -> List[Workflow]:
        self.calls.append(("get_all",))
        self._check("get_all")
        return list(self.workflows)

    async def get_one(self, workflow_id: str) -> Workflow:
        self.calls.append(("get_one", workflow_id))
        self._check("get_one")
        for w in self.workflows:
            if w.id == workflow_id:
                return w
        raise APIError("Workflow not found", status_code=404)

    async def create(self, workflow: Workflow) -> Workflow:
        self.calls.append(("create", workflow.name))
        self._check("create")
        created = workflow.model_copy(update={"id": f"wf-{next(self._ids)}"})
        self.workflows.append(created)
        return created

    async def update(self, workflow_id: str, patch) -> Workflow:
        self.calls.append(("update", workflow_id))
        self._check("update")
        existing = next(w for w in self.workflows if w.id == workflow_id)
        merged = {**existing.to_wire(), **patch_to_wire(patch)}
        updated = Workflow.model_validate(merged)
        self.workflows = [updated if w.id == workflow_id else w for w in self.workflows]
        return updated

    async def delete(self, workflow_id: str) -> None:
        self.calls.append(("delete", workflow_id))
        self._check("delete")
        self.workflows = [w for w in self.workflows if w.id != workflow_id]

    async def validate(self, graph) -> ValidationResult:
        self.calls.append(("validate",))
        self._check("validate")
        return self.validation


class GatedWorkflowAPI(FakeWorkflowAPI):
    """Holds every get_all/update call until its gate is released."""

    def __init__(self, workflows: Optional[List[Workflow]] = None) -> None:
        super().__init__(workflows)
        self.gates: List[asyncio.Event] = []

    async def _wait(self) -> None:
        gate = asyncio.Event()
        self.gates.append(gate)
        await gate.wait()

    async def get_all(self) -> List[Workflow]:
        await self._wait()
        return await super().get_all()

    async def update(self, workflow_id: str, patch) -> Workflow:
        await self._wait()
        return Workflow(id=workflow_id, name=patch["name"])


async def wait_for_gates(api: GatedWorkflowAPI, n: int) -> None:
    for _ in range(100):
        if len(api.gates) >= n:
            return
        await asyncio.sleep(0)
    raise AssertionError(f"expected {n} pending calls, got {len(api.gates)}")


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def config():
    return ClientConfig(api_url=BASE_URL)


@pytest.fixture
def fake_service():
    return FakeService()


@pytest.fixture
def transport(fake_service):
    return httpx.MockTransport(fake_service.handler)


@pytest.fixture
def confirmations():
    """Answers handed to confirm prompts, plus a log of the prompts asked."""
    return {"answer": True, "asked": []}


@pytest.fixture
def app(config, transport, confirmations):
    def confirm(prompt: str) -> bool:
        confirmations["asked"].append(prompt)
        return confirmations["answer"]

    return FlowBuilderApp(config=config, transport=transport, confirm=confirm)


@pytest.fixture
def workflow_api():
    return FakeWorkflowAPI([
        Workflow(id="wf-1", name="ETL"),
        Workflow(id="wf-2", name="Reports"),
    ])


@pytest.fixture
def store(workflow_api):
    return WorkflowStore(workflow_api)
