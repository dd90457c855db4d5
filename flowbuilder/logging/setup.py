"""Logging setup for applications embedding the flow builder core."""

from __future__ import annotations

import logging
from typing import Optional, Union

from flowbuilder.config.client_config import get_client_config

_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
_HANDLER_NAME = "flowbuilder"


def configure_logging(level: Optional[Union[str, int]] = None) -> logging.Logger:
    """Attach one stream handler to the ``flowbuilder`` logger.

    Calling it again only updates the level.
    """
    if level is None:
        level = get_client_config().log_level
    if isinstance(level, str):
        level = level.upper()

    root = logging.getLogger("flowbuilder")
    root.setLevel(level)
    if not any(h.get_name() == _HANDLER_NAME for h in root.handlers):
        handler = logging.StreamHandler()
        handler.set_name(_HANDLER_NAME)
        handler.setFormatter(logging.Formatter(_FORMAT))
        root.addHandler(handler)
    return root
