"""
Workflow Data Models — persisted workflows, components, and connections.

These are the serializable records exchanged with the persistence
service. They are held by ``WorkflowStore`` and produced from the
live editor graph by the converter.

Python attributes are snake_case; the service speaks camelCase, so
every camelCase key is declared as an alias. Serialize with
``to_wire()`` to get exactly the JSON the service expects.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Every persisted component is drawn with this single rendering node-kind;
# the semantic component type lives in ``data.type``.
EDITOR_NODE_KIND = "customNode"

WARNING_PREFIX = "⚠️"


class WireModel(BaseModel):
    """Base for records that travel over the wire."""

    model_config = ConfigDict(populate_by_name=True)

    def to_wire(self) -> Dict[str, Any]:
        """Dump using wire names, omitting unset optionals."""
        return self.model_dump(by_alias=True, exclude_none=True)


class Position(WireModel):
    """Canvas coordinates. Purely cosmetic."""

    x: float = 0.0
    y: float = 0.0


class ComponentData(WireModel):
    """Display label, semantic type, and type-specific configuration."""

    label: str = ""
    type: str = ""
    config: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("label", "type", mode="before")
    @classmethod
    def _null_text(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("config", mode="before")
    @classmethod
    def _null_config(cls, value: Any) -> Any:
        return {} if value is None else value


class WorkflowComponent(WireModel):
    """A node of a persisted workflow graph."""

    id: str
    type: str = EDITOR_NODE_KIND
    position: Position = Field(default_factory=Position)
    data: ComponentData = Field(default_factory=ComponentData)
    style: Dict[str, Any] = Field(default_factory=dict)

    # The service may send explicit nulls for a freshly created node
    @field_validator("type", mode="before")
    @classmethod
    def _null_kind(cls, value: Any) -> Any:
        return EDITOR_NODE_KIND if value is None else value

    @field_validator("position", "data", "style", mode="before")
    @classmethod
    def _null_mapping(cls, value: Any) -> Any:
        return {} if value is None else value


class WorkflowConnection(WireModel):
    """A directed edge between two component handles."""

    id: str
    source: str
    target: str
    source_handle: Optional[str] = Field(default=None, alias="sourceHandle")
    target_handle: Optional[str] = Field(default=None, alias="targetHandle")


class WorkflowGraph(WireModel):
    """Just the graph part of a workflow: what save and validate send."""

    components: List[WorkflowComponent] = Field(default_factory=list)
    connections: List[WorkflowConnection] = Field(default_factory=list)

    @field_validator("components", "connections", mode="before")
    @classmethod
    def _null_graph(cls, value: Any) -> Any:
        return [] if value is None else value


class Workflow(WireModel):
    """A named, persisted graph of components and connections.

    ``id`` and the timestamps are assigned by the service on first
    persist. ``configurations`` is a free-form placeholder map.
    A workflow that has no graph yet may arrive with null
    ``components``/``connections``; those read as empty.
    """

    id: Optional[str] = None
    name: str = Field(min_length=1)
    description: Optional[str] = None
    components: List[WorkflowComponent] = Field(default_factory=list)
    connections: List[WorkflowConnection] = Field(default_factory=list)
    configurations: Dict[str, Any] = Field(default_factory=dict)
    created_at: Optional[str] = Field(default=None, alias="createdAt")
    updated_at: Optional[str] = Field(default=None, alias="updatedAt")

    @field_validator("components", "connections", mode="before")
    @classmethod
    def _null_graph(cls, value: Any) -> Any:
        return [] if value is None else value

    @field_validator("configurations", mode="before")
    @classmethod
    def _null_configurations(cls, value: Any) -> Any:
        return {} if value is None else value


class ValidationResult(WireModel):
    """Verdict returned by the external validator.

    Entries starting with the warning glyph are advisory; ``valid``
    is always the service's own verdict.
    """

    valid: bool
    errors: List[str] = Field(default_factory=list)

    @property
    def warnings(self) -> List[str]:
        return [e for e in self.errors if e.startswith(WARNING_PREFIX)]

    @property
    def hard_errors(self) -> List[str]:
        return [e for e in self.errors if not e.startswith(WARNING_PREFIX)]

    @property
    def is_clean(self) -> bool:
        """True when every reported entry is only a warning."""
        return not self.hard_errors


# ============================================================================
# Identity records
# ============================================================================


class User(WireModel):
    id: str
    email: str
    role: str = ""


class AuthResponse(WireModel):
    """Body of ``/auth/login`` and ``/auth/register``."""

    access_token: str
    user: User


class VerifyResponse(WireModel):
    """Body of ``/auth/verify``."""

    valid: bool
    user: Optional[User] = None
