# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.
"""Flags read from the environment.

A flag is enabled by setting the environment variable to ``1``.
"""

import logging
import os

logger = logging.getLogger(__name__)


def _load_boolean_flag(
    name: str,
    *,
    this_will: str,
    default: bool = False,
) -> bool:
    """Load a boolean flag from environment variable.

    Args:
        name: The name of the environment variable.
        this_will: A string that describes what this flag will do.
        default: The default value if envvar not defined.
    """
    undefined = os.getenv(name) is None
    state = os.getenv(name) == "1"
    if state:
        logger.warning("Flag %s is enabled. This will %s.", name, this_will)
    if undefined:
        state = default
    return state


CHECK_INVARIANTS: bool = _load_boolean_flag(
    "GRAPHCANON_CHECK_INVARIANTS",
    this_will="check both graphs for consistency before comparing them in assertions",
)
SHOW_FULL_FORMS: bool = _load_boolean_flag(
    "GRAPHCANON_SHOW_FULL_FORMS",
    this_will="include the complete canonical forms in assertion messages",
)
