"""布局树查询与校验

查询函数均为纯函数，不修改树。
validate_tree 检查所有结构和数值不变量，用于测试和持久化加载。
"""

import math
from collections.abc import Iterator

from ..config import MIN_SIZE, SIZE_TOLERANCE, SIZE_TOTAL
from .types import GroupNode, SplitNode, WorkspaceNode


def iter_nodes(node: WorkspaceNode) -> Iterator[WorkspaceNode]:
    """前序遍历所有节点"""
    yield node
    if isinstance(node, SplitNode):
        for child in node.children:
            yield from iter_nodes(child)


def get_all_group_ids(node: WorkspaceNode) -> list[str]:
    """按从左到右（从上到下）顺序返回所有 pane group ID"""
    if isinstance(node, GroupNode):
        return [node.pane_group_id]
    return [gid for child in node.children for gid in get_all_group_ids(child)]


def count_groups(node: WorkspaceNode) -> int:
    return len(get_all_group_ids(node))


def find_group_node(node: WorkspaceNode, group_id: str) -> GroupNode | None:
    """查找指向指定 pane group 的叶子节点"""
    for candidate in iter_nodes(node):
        if isinstance(candidate, GroupNode) and candidate.pane_group_id == group_id:
            return candidate
    return None


def find_split(node: WorkspaceNode, split_id: str) -> SplitNode | None:
    """按 ID 查找 split 节点"""
    for candidate in iter_nodes(node):
        if isinstance(candidate, SplitNode) and candidate.id == split_id:
            return candidate
    return None


def find_parent(node: WorkspaceNode, node_id: str) -> SplitNode | None:
    """查找节点的父 split，根节点或未知 ID 返回 None"""
    for candidate in iter_nodes(node):
        if isinstance(candidate, SplitNode) and any(
            child.id == node_id for child in candidate.children
        ):
            return candidate
    return None


def get_split_sizes(node: WorkspaceNode, split_id: str) -> tuple[float, ...] | None:
    split = find_split(node, split_id)
    return split.sizes if split else None


def validate_tree(node: WorkspaceNode) -> list[str]:
    """检查树的不变量

    Returns:
        违反项描述列表，空列表表示合法
    """
    problems: list[str] = []
    seen_ids: set[str] = set()
    seen_groups: set[str] = set()

    for candidate in iter_nodes(node):
        if candidate.id in seen_ids:
            problems.append(f"duplicate node id {candidate.id}")
        seen_ids.add(candidate.id)

        if isinstance(candidate, GroupNode):
            if candidate.pane_group_id in seen_groups:
                problems.append(f"duplicate pane group {candidate.pane_group_id}")
            seen_groups.add(candidate.pane_group_id)
            continue

        if len(candidate.children) < 2:
            problems.append(f"split {candidate.id} has {len(candidate.children)} children")
        if len(candidate.children) != len(candidate.sizes):
            problems.append(
                f"split {candidate.id} has {len(candidate.children)} children "
                f"but {len(candidate.sizes)} sizes"
            )
        if not all(math.isfinite(size) for size in candidate.sizes):
            problems.append(f"split {candidate.id} has non-finite sizes {list(candidate.sizes)}")
            continue
        total = sum(candidate.sizes)
        if abs(total - SIZE_TOTAL) > SIZE_TOLERANCE:
            problems.append(f"split {candidate.id} sizes sum to {total}")
        for index, size in enumerate(candidate.sizes):
            if size < MIN_SIZE - SIZE_TOLERANCE:
                problems.append(f"split {candidate.id} size[{index}]={size} below {MIN_SIZE}")

    return problems


def is_valid(node: WorkspaceNode) -> bool:
    """树是否满足全部不变量"""
    return not validate_tree(node)
