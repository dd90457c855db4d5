"""
Typed node configurations — one variant per component type.

The stored ``data.config`` of a component is a plain map so that
round-trips through the service never lose keys. These variants are
the typed view of that map: each carries only the fields legal for
its component type, and ``RawConfig`` holds the arbitrary structured
data of any other type.
"""

from __future__ import annotations

import json
from logging import getLogger
from typing import Any, Dict, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

logger = getLogger(__name__)

FILE_OUTPUT_FORMATS = ("csv", "json", "xml")


class _TypedConfig(BaseModel):
    # Unknown keys stay in the stored map; the typed view drops them.
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    def to_config(self) -> Dict[str, Any]:
        """Back to the stored camelCase map, without the tag."""
        return self.model_dump(by_alias=True, exclude_none=True, exclude={"kind"})


class InputConfig(_TypedConfig):
    kind: Literal["input"] = "input"
    input_type: Optional[str] = Field(default=None, alias="inputType")
    default_value: Optional[str] = Field(default=None, alias="defaultValue")
    required: bool = False
    placeholder: Optional[str] = None
    help_text: Optional[str] = Field(default=None, alias="helpText")


class ProcessConfig(_TypedConfig):
    kind: Literal["process"] = "process"
    process_type: Optional[str] = Field(default=None, alias="processType")
    logic: Optional[str] = None
    critical: bool = False
    timeout: Optional[Union[str, int]] = None
    enable_retry: bool = Field(default=False, alias="enableRetry")
    max_retries: Optional[Union[str, int]] = Field(default=None, alias="maxRetries")


class OutputConfig(_TypedConfig):
    kind: Literal["output"] = "output"
    output_format: Optional[str] = Field(default=None, alias="outputFormat")
    file_name: Optional[str] = Field(default=None, alias="fileName")
    email_template: Optional[str] = Field(default=None, alias="emailTemplate")
    email_subject: Optional[str] = Field(default=None, alias="emailSubject")
    webhook_url: Optional[str] = Field(default=None, alias="webhookUrl")
    http_method: Optional[str] = Field(default=None, alias="httpMethod")
    include_timestamp: bool = Field(default=False, alias="includeTimestamp")

    @property
    def writes_file(self) -> bool:
        return self.output_format in FILE_OUTPUT_FORMATS


class ConditionConfig(_TypedConfig):
    kind: Literal["condition"] = "condition"
    condition: Optional[str] = None
    true_branch: Optional[str] = Field(default=None, alias="trueBranch")
    false_branch: Optional[str] = Field(default=None, alias="falseBranch")
    operator_type: Optional[str] = Field(default=None, alias="operatorType")
    description: Optional[str] = None


class RawConfig(_TypedConfig):
    """Arbitrary structured data for component types without a schema."""

    kind: Literal["raw"] = "raw"
    data: Dict[str, Any] = Field(default_factory=dict)

    def to_config(self) -> Dict[str, Any]:
        return dict(self.data)

    @classmethod
    def from_json(cls, text: str, previous: Optional["RawConfig"] = None) -> "RawConfig":
        """Parse an edited JSON blob.

        Unparsable text, or JSON that is not an object, leaves the
        previous value in place.
        """
        previous = previous or cls()
        try:
            parsed = json.loads(text)
        except (json.JSONDecodeError, TypeError) as e:
            logger.debug(f"Ignoring malformed raw config edit: {e}")
            return previous
        if not isinstance(parsed, dict):
            logger.debug("Ignoring raw config edit that is not a JSON object")
            return previous
        return cls(data=parsed)


NodeConfig = Union[InputConfig, ProcessConfig, OutputConfig, ConditionConfig, RawConfig]

_VARIANTS = {
    "input": InputConfig,
    "process": ProcessConfig,
    "output": OutputConfig,
    "condition": ConditionConfig,
}


def parse_node_config(node_type: str, config: Optional[Dict[str, Any]]) -> NodeConfig:
    """Return the typed variant for ``node_type``.

    Values of the wrong shape for a known type fall back to ``RawConfig``
    rather than raising.
    """
    config = config or {}
    variant = _VARIANTS.get(node_type)
    if variant is None:
        return RawConfig(data=dict(config))
    try:
        return variant.model_validate(config)
    except ValueError as e:
        logger.debug(f"Config for '{node_type}' does not fit its schema: {e}")
        return RawConfig(data=dict(config))
