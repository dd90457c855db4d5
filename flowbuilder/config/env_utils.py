"""
Environment helpers for dataclass-based configs.

``read_env_defaults`` turns an ``_ENV_MAP`` (field → env var) into
keyword arguments for the config constructor, coerced to each
field's declared type.
"""

from __future__ import annotations

import os
from dataclasses import Field
from logging import getLogger
from typing import Any, Dict, Mapping

logger = getLogger(__name__)

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def _coerce(raw: str, type_name: str) -> Any:
    if type_name == "bool":
        value = raw.strip().lower()
        if value in _TRUE_VALUES:
            return True
        if value in _FALSE_VALUES:
            return False
        raise ValueError(f"not a boolean: {raw!r}")
    if type_name == "int":
        return int(raw)
    if type_name == "float":
        return float(raw)
    return raw


def read_env_defaults(
    env_map: Mapping[str, str],
    fields: Mapping[str, Field],
) -> Dict[str, Any]:
    """Collect constructor kwargs from environment variables.

    Only variables that are set are returned; the dataclass
    defaults apply to everything else. Values that fail to
    coerce are skipped with a warning.
    """
    values: Dict[str, Any] = {}
    for field_name, env_var in env_map.items():
        raw = os.environ.get(env_var)
        if raw is None or field_name not in fields:
            continue
        # Field types are strings under ``from __future__ import annotations``
        type_name = fields[field_name].type
        if not isinstance(type_name, str):
            type_name = getattr(type_name, "__name__", "str")
        try:
            values[field_name] = _coerce(raw, type_name)
        except ValueError as e:
            logger.warning(f"Ignoring {env_var}={raw!r}: {e}")
    return values
