"""Workspace ID utilities

Generates and inspects the prefixed IDs used across the workspace:
- grp-<millis>-<n>    - pane group (also the id of its GroupNode leaf)
- split-<millis>-<n>  - split node
- tab-<millis>-<n>    - pane group tab

The millisecond stamp keeps IDs readable in logs; the process-wide counter
keeps them unique when several are generated within the same millisecond.
"""

import itertools
import time
from enum import Enum

from termlayout import config

_counter = itertools.count(1)


class IdKind(Enum):
    """Kind of workspace ID, keyed by prefix."""

    GROUP = config.GROUP_ID_PREFIX
    SPLIT = config.SPLIT_ID_PREFIX
    TAB = config.TAB_ID_PREFIX


def _uid(prefix: str) -> str:
    return f"{prefix}-{int(time.time() * 1000)}-{next(_counter)}"


def make_group_id() -> str:
    """Create a new pane group ID."""
    return _uid(IdKind.GROUP.value)


def make_split_id() -> str:
    """Create a new split node ID."""
    return _uid(IdKind.SPLIT.value)


def make_tab_id() -> str:
    """Create a new tab ID."""
    return _uid(IdKind.TAB.value)


def get_id_kind(workspace_id: str) -> IdKind | None:
    """Extract the kind of a workspace ID from its prefix.

    Args:
        workspace_id: ID like "grp-1700000000000-3"

    Returns:
        IdKind enum, or None if the prefix is unknown
    """
    prefix = workspace_id.split("-", 1)[0]
    try:
        return IdKind(prefix)
    except ValueError:
        return None


def is_group_id(workspace_id: str) -> bool:
    """Check if an ID was generated for a pane group."""
    return get_id_kind(workspace_id) == IdKind.GROUP


def is_split_id(workspace_id: str) -> bool:
    """Check if an ID was generated for a split node."""
    return get_id_kind(workspace_id) == IdKind.SPLIT


def short_id(workspace_id: str, length: int = 8) -> str:
    """Get a short display version of an ID for logging.

    Keeps the kind prefix and the tail of the ID, which carries the counter.

    Args:
        workspace_id: The ID to shorten
        length: Maximum length of the tail (default 8)

    Returns:
        Shortened ID like "grp:...0000-3"
    """
    kind = get_id_kind(workspace_id)
    if kind is None:
        return workspace_id[:length]
    tail = workspace_id[len(kind.value) + 1:]
    return f"{kind.value}:{tail[-length:]}"
