"""Auth endpoints: login, register, and token verification."""

from __future__ import annotations

from flowbuilder.api.client import APIService
from flowbuilder.workflow.workflow_model import AuthResponse, VerifyResponse


class AuthAPI:

    def __init__(self, service: APIService) -> None:
        self._service = service

    async def login(self, email: str, password: str) -> AuthResponse:
        body = await self._service.request(
            "POST", "/auth/login", json={"email": email, "password": password},
        )
        return AuthResponse.model_validate(body)

    async def register(self, email: str, password: str) -> AuthResponse:
        body = await self._service.request(
            "POST", "/auth/register", json={"email": email, "password": password},
        )
        return AuthResponse.model_validate(body)

    async def verify_token(self) -> VerifyResponse:
        body = await self._service.request("GET", "/auth/verify")
        return VerifyResponse.model_validate(body)
