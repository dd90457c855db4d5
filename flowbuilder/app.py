"""
FlowBuilderApp — wires identity, workflow store, and editor together.

This is the calling layer the core is embedded in: it owns the HTTP
service, routes identity changes into the store through an explicit
listener, and loads the signed-in user's workflows once per identity.

Usage::

    async with FlowBuilderApp() as app:
        await app.login("ada@example.com", "secret")
        wf = await app.create_workflow("ETL")
        node = app.editor.add_node("input")
        await app.editor.save()
"""

from __future__ import annotations

from logging import getLogger
from typing import Optional

import httpx

from flowbuilder.api.auth_api import AuthAPI
from flowbuilder.api.client import APIService
from flowbuilder.api.workflow_api import WorkflowAPI
from flowbuilder.auth.auth_session import AuthSession
from flowbuilder.config.client_config import ClientConfig, get_client_config
from flowbuilder.editor.editor_session import ConfirmCallback, EditorSession
from flowbuilder.workflow.workflow_model import User, Workflow
from flowbuilder.workflow.workflow_store import WorkflowStore

logger = getLogger(__name__)

CONFIRM_DELETE_WORKFLOW = "Are you sure you want to delete this workflow?"


class FlowBuilderApp:
    """Session-level facade over auth, store, and editor."""

    def __init__(
        self,
        config: Optional[ClientConfig] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        confirm: Optional[ConfirmCallback] = None,
    ) -> None:
        self.config = config or get_client_config()
        self._confirm = confirm
        self.service = APIService(self.config, transport=transport)
        self.auth = AuthSession(self.service, AuthAPI(self.service))
        self.store = WorkflowStore(WorkflowAPI(self.service))
        self.editor = EditorSession(self.store, config=self.config, confirm=confirm)

        # Any identity change wipes every workflow held for the previous one
        self.auth.add_identity_listener(self.store.clear_all)

    async def __aenter__(self) -> "FlowBuilderApp":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        self.editor.close()
        await self.service.aclose()

    @property
    def user(self) -> Optional[User]:
        return self.auth.user

    # ── Identity ──

    async def login(self, email: str, password: str) -> User:
        user = await self.auth.login(email, password)
        await self.load_workflows()
        return user

    async def register(self, email: str, password: str) -> User:
        user = await self.auth.register(email, password)
        await self.load_workflows()
        return user

    async def restore_session(self, token: str) -> Optional[User]:
        """Resume with a previously issued token."""
        self.service.set_token(token)
        user = await self.auth.verify()
        if user is not None:
            await self.load_workflows()
        return user

    def logout(self) -> None:
        self.auth.logout()

    # ── Workflows ──

    async def load_workflows(self, force: bool = False) -> bool:
        user = self.auth.user
        return await self.store.load_all(user.id if user else None, force=force)

    async def create_workflow(self, name: str, description: str = "") -> Workflow:
        draft = Workflow(
            name=name,
            description=description,
            components=[],
            connections=[],
            configurations={},
        )
        return await self.store.create(draft)

    async def delete_workflow(self, workflow_id: str) -> bool:
        """Delete after confirmation. Returns False if the user declined."""
        if self._confirm is not None and not self._confirm(CONFIRM_DELETE_WORKFLOW):
            return False
        await self.store.delete(workflow_id)
        return True

    def select_workflow(self, workflow: Optional[Workflow]) -> None:
        self.store.set_current(workflow)
