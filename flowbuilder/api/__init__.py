"""HTTP clients for the persistence/validation service."""

from flowbuilder.api.client import APIService
from flowbuilder.api.auth_api import AuthAPI
from flowbuilder.api.workflow_api import WorkflowAPI, WorkflowPatch

__all__ = ["APIService", "AuthAPI", "WorkflowAPI", "WorkflowPatch"]
