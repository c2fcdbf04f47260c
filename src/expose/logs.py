# Copyright (c) Syntropy Systems
"""Verbose-aware diagnostic narration."""
from __future__ import annotations

import logging


def narrate(logger: logging.Logger, verbose: bool, msg: str, *args: object) -> None:  # noqa: FBT001
    """Log a progress message at INFO when verbose, DEBUG otherwise."""
    logger.log(logging.INFO if verbose else logging.DEBUG, msg, *args)
