"""Workspace 模块

提供分屏布局引擎的核心组件：
- types: 数据类型定义（WorkspaceNode, PaneGroup, WorkspaceCallbacks 等）
- tree: 查询与不变量校验
- mutations: split / close / resize
- drag: 拖拽会话与 DragController
- render: 树 → 视图结构
- geometry: 节点像素矩形与测量
- manager: WorkspaceManager 宿主侧状态
- persistence: 快照持久化
"""

from .types import (
    Axis,
    Direction,
    GroupNode,
    SplitNode,
    WorkspaceNode,
    TabType,
    PaneGroupTab,
    PaneGroup,
    WorkspaceCallbacks,
    group_node,
    node_from_dict,
)
from .tree import (
    iter_nodes,
    get_all_group_ids,
    count_groups,
    find_group_node,
    find_split,
    find_parent,
    get_split_sizes,
    validate_tree,
    is_valid,
)
from .mutations import normalize_sizes, split, close, resize
from .drag import (
    IDLE,
    Idle,
    Dragging,
    DragSession,
    DragController,
    MeasurementProvider,
    start_drag,
    drag_move,
    end_drag,
)
from .render import (
    ContentKind,
    ContentRenderers,
    SplitView,
    SplitItemView,
    HandleView,
    GroupView,
    MissingGroupView,
    fold_tree,
    render_workspace,
)
from .geometry import Rect, compute_rects, layout_measurement, group_at
from .manager import WorkspaceManager
from . import persistence

__all__ = [
    # Types
    "Axis",
    "Direction",
    "GroupNode",
    "SplitNode",
    "WorkspaceNode",
    "TabType",
    "PaneGroupTab",
    "PaneGroup",
    "WorkspaceCallbacks",
    "group_node",
    "node_from_dict",
    # Tree
    "iter_nodes",
    "get_all_group_ids",
    "count_groups",
    "find_group_node",
    "find_split",
    "find_parent",
    "get_split_sizes",
    "validate_tree",
    "is_valid",
    # Mutations
    "normalize_sizes",
    "split",
    "close",
    "resize",
    # Drag
    "IDLE",
    "Idle",
    "Dragging",
    "DragSession",
    "DragController",
    "MeasurementProvider",
    "start_drag",
    "drag_move",
    "end_drag",
    # Render
    "ContentKind",
    "ContentRenderers",
    "SplitView",
    "SplitItemView",
    "HandleView",
    "GroupView",
    "MissingGroupView",
    "fold_tree",
    "render_workspace",
    # Geometry
    "Rect",
    "compute_rects",
    "layout_measurement",
    "group_at",
    # Manager
    "WorkspaceManager",
    # Persistence
    "persistence",
]
