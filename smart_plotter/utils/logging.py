from __future__ import annotations

import logging
from typing import Any, Mapping, Union

DEFAULT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def setup_logging(level: Union[str, int] = "INFO", fmt: str = DEFAULT_FORMAT) -> None:
    """Configure the root logger once; later calls only change the level."""
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        if not isinstance(resolved, int):
            raise ValueError(f"Unknown logging level: {level}")
        level = resolved

    root = logging.getLogger()
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(fmt))
        root.addHandler(handler)
    root.setLevel(level)


def setup_logging_from_config(cfg: Mapping[str, Any]) -> None:
    setup_logging(level=(cfg.get("logging", {}) or {}).get("level", "INFO"))
