"""
Exception types raised across the flow builder core.

Network failures surface as ``APIError``; local edits that break a
component's field rules surface as ``NodeConfigError``.
"""

from __future__ import annotations

from typing import Dict, Optional


class FlowBuilderError(Exception):
    """Base class for all flow builder errors."""


class APIError(FlowBuilderError):
    """The persistence/validation service rejected a request or was unreachable."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class NodeConfigError(FlowBuilderError, ValueError):
    """A node edit failed field validation.

    ``errors`` maps field names to human-readable messages.
    """

    def __init__(self, errors: Dict[str, str]) -> None:
        self.errors = dict(errors)
        summary = "; ".join(f"{k}: {v}" for k, v in self.errors.items())
        super().__init__(f"Invalid node configuration ({summary})")


class InvalidConnectionError(FlowBuilderError, ValueError):
    """A connection violates handle direction or references a missing node."""


class UnknownNodeError(FlowBuilderError, KeyError):
    """An editor operation referenced a node id that is not on the canvas."""

    def __init__(self, node_id: str) -> None:
        super().__init__(node_id)
        self.node_id = node_id

    def __str__(self) -> str:
        return f"Unknown node: {self.node_id}"
