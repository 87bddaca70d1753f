"""Drag Controller - 拖拽 split handle 调整比例

一次拖拽会话从 handle 上的 pointer-down 开始，到 pointer-up 结束：

    Idle --start_drag--> Dragging --drag_move*--> Dragging --end_drag--> Idle

职责：
- start 时测量一次容器交叉轴尺寸并缓存（拖拽期间不变）
- move 时把像素 delta 换算为百分比，调整 handle 两侧子节点并立即 resize
- end 时回到 Idle，不再提交任何变更

会话状态是显式的值（Idle | Dragging），纯函数 API 接收并返回它；
DragController 是给宿主用的薄封装。
"""

import math
from collections.abc import Callable
from dataclasses import dataclass
from typing import Union

from ..config import MIN_SIZE
from ..core.ids import short_id
from ..telemetry import get_logger, metrics
from .mutations import resize
from .tree import find_split
from .types import Axis, Direction, OnResizeSplit, WorkspaceNode

logger = get_logger(__name__)

# (split_id, axis) -> 容器在该轴上的像素尺寸
MeasurementProvider = Callable[[str, Axis], float]
TreeGetter = Callable[[], WorkspaceNode]


@dataclass(frozen=True)
class Idle:
    """无拖拽"""


@dataclass(frozen=True)
class Dragging:
    """拖拽中

    Attributes:
        split_id: 被拖拽 handle 所属 split
        handle_index: handle 左/上侧子节点下标（调整 index 与 index+1）
        direction: split 方向
        container_size: start 时测得的交叉轴像素尺寸，0 表示后续 move 全部忽略
    """
    split_id: str
    handle_index: int
    direction: Direction
    container_size: float


DragSession = Union[Idle, Dragging]

IDLE = Idle()


def start_drag(
    tree: WorkspaceNode,
    split_id: str,
    handle_index: int,
    measure: MeasurementProvider,
) -> DragSession:
    """开始拖拽会话

    Args:
        tree: 当前树
        split_id: handle 所属 split
        handle_index: handle 下标（0 表示第一个和第二个子节点之间）
        measure: 测量函数，只调用一次

    Returns:
        Dragging；split 不存在时返回 Idle

    Raises:
        ValueError: handle_index 超出范围
    """
    split_node = find_split(tree, split_id)
    if split_node is None:
        logger.debug(f"[Drag] start: unknown split {short_id(split_id)}, stay idle")
        metrics.inc("drag.noop", {"op": "start"})
        return IDLE

    if not 0 <= handle_index < len(split_node.children) - 1:
        raise ValueError(
            f"Handle {handle_index} out of range for split with "
            f"{len(split_node.children)} children"
        )

    size = float(measure(split_id, split_node.direction.cross_axis))
    if not math.isfinite(size) or size <= 0:
        logger.debug(f"[Drag] start: split {short_id(split_id)} measured {size}, moves disabled")
        size = 0.0

    metrics.inc("drag.start")
    return Dragging(
        split_id=split_id,
        handle_index=handle_index,
        direction=split_node.direction,
        container_size=size,
    )


def drag_move(session: DragSession, tree: WorkspaceNode, delta: float) -> WorkspaceNode:
    """处理一次 pointer-move

    Args:
        session: 当前会话
        tree: 当前树（每次 move 读取最新 sizes）
        delta: 交叉轴上的像素位移

    Returns:
        新树；Idle、尺寸为 0、delta 非有限值、split 已消失时返回原树
    """
    if not isinstance(session, Dragging) or session.container_size == 0:
        return tree

    split_node = find_split(tree, session.split_id)
    index = session.handle_index
    if split_node is None or index + 1 >= len(split_node.children):
        # 拖拽期间 split 被关闭或结构变化
        metrics.inc("drag.noop", {"op": "move"})
        return tree

    delta_percent = delta / session.container_size * 100
    if not math.isfinite(delta_percent):
        metrics.inc("drag.noop", {"op": "move"})
        return tree

    sizes = list(split_node.sizes)
    sizes[index] = max(MIN_SIZE, sizes[index] + delta_percent)
    sizes[index + 1] = max(MIN_SIZE, sizes[index + 1] - delta_percent)

    metrics.inc("drag.move")
    return resize(tree, session.split_id, sizes)


def end_drag(session: DragSession) -> Idle:
    """结束会话，不提交变更"""
    if isinstance(session, Dragging):
        metrics.inc("drag.end")
    return IDLE


class DragController:
    """宿主侧拖拽控制器

    持有当前会话（同一时刻最多一个），move 后通过 on_resize_split
    把规范化后的 sizes 交给宿主提交。
    """

    def __init__(
        self,
        measure: MeasurementProvider,
        get_tree: TreeGetter,
        on_resize_split: OnResizeSplit,
    ):
        self._measure = measure
        self._get_tree = get_tree
        self._on_resize_split = on_resize_split
        self._session: DragSession = IDLE

    @property
    def session(self) -> DragSession:
        return self._session

    @property
    def is_dragging(self) -> bool:
        return isinstance(self._session, Dragging)

    def set_measurement(self, measure: MeasurementProvider) -> None:
        """替换测量函数（下一次 start 生效）"""
        self._measure = measure

    def start(self, split_id: str, handle_index: int) -> DragSession:
        if self.is_dragging:
            # pointer capture 是独占的，新会话开始前结束旧会话
            self.end()
        self._session = start_drag(self._get_tree(), split_id, handle_index, self._measure)
        return self._session

    def move(self, delta: float) -> bool:
        """处理 pointer-move

        Returns:
            是否提交了新的 sizes
        """
        session = self._session
        if not isinstance(session, Dragging):
            return False

        tree = self._get_tree()
        new_tree = drag_move(session, tree, delta)
        if new_tree == tree:
            return False

        new_split = find_split(new_tree, session.split_id)
        assert new_split is not None
        self._on_resize_split(session.split_id, list(new_split.sizes))
        return True

    def end(self) -> None:
        self._session = end_drag(self._session)
