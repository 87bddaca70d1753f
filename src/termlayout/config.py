"""termlayout 配置

配置分为以下几类：
- 布局配置：最小尺寸、容差
- ID 配置：各类 ID 前缀
- Tab 配置：标题约定
- Web 配置：监听地址、默认视口
- 持久化配置：路径、版本
- 日志 / 指标配置
"""

import os
from pathlib import Path

# === 布局配置 ===
MIN_SIZE = 10.0  # split 子节点最小百分比
SIZE_TOTAL = 100.0  # split 子节点百分比总和
SIZE_TOLERANCE = 1e-6  # 总和校验容差
DEFAULT_SPLIT_SIZES = (50.0, 50.0)  # 新建 split 的初始比例

# === ID 配置 ===
GROUP_ID_PREFIX = "grp"
SPLIT_ID_PREFIX = "split"
TAB_ID_PREFIX = "tab"

# === Tab 配置 ===
SETTINGS_TAB_TITLE = "Settings"
SETTINGS_SESSION_ID = "settings"
TUNNEL_TITLE_PREFIX = "Tunnels - "  # tunnel tab 标题前缀，渲染时去掉

# === Web 配置 ===
WEB_HOST = os.environ.get("TERMLAYOUT_HOST", "127.0.0.1")
WEB_PORT = int(os.environ.get("TERMLAYOUT_PORT", "8765"))
DEFAULT_VIEWPORT_WIDTH = 1280.0  # 客户端未上报视口前使用
DEFAULT_VIEWPORT_HEIGHT = 800.0

# === 持久化配置 ===
PERSIST_ENABLED = os.environ.get("TERMLAYOUT_PERSIST", "0") == "1"
PERSIST_DIR = Path(os.environ.get("TERMLAYOUT_HOME", Path.home() / ".termlayout"))
PERSIST_FILE = PERSIST_DIR / "workspace.json"
PERSIST_VERSION = 1

# === 日志配置 ===
LOG_LEVEL = os.environ.get("TERMLAYOUT_LOG_LEVEL", "INFO")  # 日志级别

# === 指标配置 ===
METRICS_ENABLED = True  # 是否启用指标收集
