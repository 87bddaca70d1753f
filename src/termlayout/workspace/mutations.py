"""布局树变更 API

split / close / resize 均为纯函数：输入旧树，返回新树，旧树不变。

策略：
- 未知 ID 为合法的 no-op（返回原树），UI 并发操作会产生过期 ID
- 调用方违反前置条件（sizes 长度不符、group ID 重复）抛 ValueError
"""

import math
from collections.abc import Sequence
from dataclasses import replace

from ..config import DEFAULT_SPLIT_SIZES, MIN_SIZE, SIZE_TOLERANCE, SIZE_TOTAL
from ..core.ids import make_split_id, short_id
from ..telemetry import get_logger, metrics
from .tree import find_group_node, find_split, iter_nodes
from .types import Direction, GroupNode, SplitNode, WorkspaceNode, group_node

logger = get_logger(__name__)


def normalize_sizes(requested: Sequence[float]) -> tuple[float, ...]:
    """先 clamp 再缩放，使每项 >= MIN_SIZE 且总和为 100

    1. 每项 clamp 到 MIN_SIZE 以上，极端拖拽下子节点不会消失
    2. 总和不足 100：整体等比放大
       总和超过 100：只按比例压缩高于 MIN_SIZE 的部分，clamp 过的项保持 MIN_SIZE

    例: [5, 95] -> [10, 95] -> [10, 90]

    Raises:
        ValueError: 项数过多，无法同时满足最小尺寸和总和；或含 NaN / inf
    """
    count = len(requested)
    floor = count * MIN_SIZE
    if floor > SIZE_TOTAL + SIZE_TOLERANCE:
        raise ValueError(f"{count} children cannot each keep {MIN_SIZE}%")
    if not all(math.isfinite(size) for size in requested):
        raise ValueError(f"Sizes must be finite numbers: {list(requested)}")

    clamped = [max(MIN_SIZE, float(size)) for size in requested]
    total = sum(clamped)

    if abs(total - SIZE_TOTAL) <= SIZE_TOLERANCE:
        return tuple(clamped)

    if total < SIZE_TOTAL:
        return tuple(size / total * SIZE_TOTAL for size in clamped)

    scale = (SIZE_TOTAL - floor) / (total - floor)
    return tuple(MIN_SIZE + (size - MIN_SIZE) * scale for size in clamped)


def split(
    tree: WorkspaceNode,
    target_group_id: str,
    direction: Direction,
    new_group_id: str,
    split_id: str | None = None,
) -> WorkspaceNode:
    """把目标 group 叶子替换为 [原 group, 新 group] 的 split

    Args:
        tree: 当前树
        target_group_id: 被拆分的 pane group
        direction: 新 split 的方向
        new_group_id: 新 pane group ID（不能已存在于树中）
        split_id: 新 split 节点 ID，默认自动生成

    Returns:
        新树；目标不存在时返回原树
    """
    if find_group_node(tree, target_group_id) is None:
        logger.debug(f"[Layout] split: unknown group {short_id(target_group_id)}, ignored")
        metrics.inc("layout.noop", {"op": "split"})
        return tree

    new_split_id = split_id or make_split_id()
    existing_ids = {node.id for node in iter_nodes(tree)}
    if find_group_node(tree, new_group_id) is not None or new_group_id in existing_ids:
        raise ValueError(f"Group id already in workspace: {new_group_id}")
    if new_split_id in existing_ids or new_split_id == new_group_id:
        raise ValueError(f"Split id already in workspace: {new_split_id}")

    def _split(node: WorkspaceNode) -> WorkspaceNode:
        if isinstance(node, GroupNode):
            if node.pane_group_id != target_group_id:
                return node
            return SplitNode(
                id=new_split_id,
                direction=direction,
                children=(node, group_node(new_group_id)),
                sizes=DEFAULT_SPLIT_SIZES,
            )
        return replace(node, children=tuple(_split(child) for child in node.children))

    metrics.inc("layout.split", {"direction": direction.value})
    logger.debug(
        f"[Layout] split {short_id(target_group_id)} {direction.value} "
        f"-> {short_id(new_group_id)}"
    )
    return _split(tree)


def close(tree: WorkspaceNode, target_group_id: str) -> WorkspaceNode:
    """移除 group 叶子

    父 split 只剩一个子节点时，用该子节点替换父节点（逐级向上）。
    剩余兄弟节点的 sizes 按比例缩放回总和 100。

    Returns:
        新树；目标不存在或为唯一的根 group 时返回原树
    """
    if find_group_node(tree, target_group_id) is None:
        logger.debug(f"[Layout] close: unknown group {short_id(target_group_id)}, ignored")
        metrics.inc("layout.noop", {"op": "close"})
        return tree

    if isinstance(tree, GroupNode):
        logger.debug("[Layout] close: refusing to remove the last group")
        metrics.inc("layout.noop", {"op": "close"})
        return tree

    def _close(node: WorkspaceNode) -> WorkspaceNode | None:
        if isinstance(node, GroupNode):
            return None if node.pane_group_id == target_group_id else node

        kept: list[WorkspaceNode] = []
        kept_sizes: list[float] = []
        for child, size in zip(node.children, node.sizes):
            result = _close(child)
            if result is not None:
                kept.append(result)
                kept_sizes.append(size)

        if len(kept) == len(node.children):
            return replace(node, children=tuple(kept))
        if not kept:
            return None
        if len(kept) == 1:
            return kept[0]
        return replace(node, children=tuple(kept), sizes=normalize_sizes(kept_sizes))

    new_tree = _close(tree)
    # 根 group 已在上面排除，_close 至少保留一个叶子
    assert new_tree is not None

    metrics.inc("layout.close")
    logger.debug(f"[Layout] close {short_id(target_group_id)}")
    return new_tree


def resize(
    tree: WorkspaceNode,
    split_id: str,
    requested_sizes: Sequence[float],
) -> WorkspaceNode:
    """替换 split 的 sizes（clamp 后缩放到总和 100）

    Args:
        tree: 当前树
        split_id: 目标 split
        requested_sizes: 新比例，长度必须与子节点数一致

    Returns:
        新树；split 不存在时返回原树

    Raises:
        ValueError: requested_sizes 长度与子节点数不一致
    """
    target = find_split(tree, split_id)
    if target is None:
        logger.debug(f"[Layout] resize: unknown split {short_id(split_id)}, ignored")
        metrics.inc("layout.noop", {"op": "resize"})
        return tree

    if len(requested_sizes) != len(target.children):
        raise ValueError(
            f"Split {split_id} has {len(target.children)} children, "
            f"got {len(requested_sizes)} sizes"
        )

    sizes = normalize_sizes(requested_sizes)

    def _resize(node: WorkspaceNode) -> WorkspaceNode:
        if isinstance(node, GroupNode):
            return node
        if node.id == split_id:
            return replace(node, sizes=sizes)
        return replace(node, children=tuple(_resize(child) for child in node.children))

    metrics.inc("layout.resize")
    return _resize(tree)
