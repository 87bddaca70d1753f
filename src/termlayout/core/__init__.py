"""Core module - workspace ID utilities"""

from .ids import make_group_id, make_split_id, make_tab_id, short_id

__all__ = [
    "make_group_id",
    "make_split_id",
    "make_tab_id",
    "short_id",
]
