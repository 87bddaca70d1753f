"""持久化模块

工作区快照的版本化 JSON 镜像：
- 原子写入（temp + rename）
- checksum 校验（sha256）
- version 版本控制
- 损坏文件、非法树跳过告警
"""

import hashlib
import json
import os
import tempfile
import time
from pathlib import Path

from ..config import PERSIST_FILE, PERSIST_VERSION
from ..telemetry import get_logger, metrics
from .tree import validate_tree
from .types import node_from_dict

logger = get_logger(__name__)


def _calculate_checksum(data: bytes) -> str:
    """计算 SHA256 checksum"""
    return hashlib.sha256(data).hexdigest()


def _dump(data: dict) -> bytes:
    return json.dumps(data, ensure_ascii=False, indent=2, sort_keys=True).encode("utf-8")


def save(
    workspace: dict,
    path: Path | None = None,
    version: int = PERSIST_VERSION,
) -> bool:
    """保存工作区快照

    使用 temp + rename 原子写入，包含 checksum 校验。

    Args:
        workspace: WorkspaceManager.to_dict() 快照
        path: 保存路径，默认使用配置
        version: 版本号

    Returns:
        是否成功
    """
    path = path or PERSIST_FILE

    try:
        data = {
            "version": version,
            "saved_at": time.time(),
            "workspace": workspace,
        }
        data["checksum"] = _calculate_checksum(_dump(data))
        json_bytes = _dump(data)

        path.parent.mkdir(parents=True, exist_ok=True)

        # 原子写入：先写临时文件，再 rename
        fd, temp_path = tempfile.mkstemp(
            prefix="termlayout_workspace_",
            suffix=".tmp",
            dir=path.parent,
        )
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(json_bytes)
            os.replace(temp_path, path)
        except Exception:
            if os.path.exists(temp_path):
                os.unlink(temp_path)
            raise

        logger.info(f"[Persist] Saved workspace with {len(workspace.get('groups', {}))} groups")
        return True

    except (OSError, TypeError, ValueError) as e:
        logger.error(f"[Persist] Save failed: {e}")
        metrics.inc("persist.error", {"op": "save"})
        return False


def load(
    path: Path | None = None,
    version: int = PERSIST_VERSION,
) -> dict | None:
    """加载工作区快照

    校验 version、checksum 和树的不变量，失败时返回 None。

    Args:
        path: 文件路径，默认使用配置
        version: 期望的版本号

    Returns:
        工作区快照，失败返回 None
    """
    path = path or PERSIST_FILE

    if not path.exists():
        logger.debug(f"[Persist] File not found: {path}")
        return None

    try:
        data = json.loads(path.read_bytes().decode("utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        logger.warning(f"[Persist] Invalid file: {e}")
        metrics.inc("persist.error", {"op": "load", "reason": "json"})
        return None

    if not isinstance(data, dict):
        logger.warning("[Persist] Invalid file: top level is not an object")
        metrics.inc("persist.error", {"op": "load", "reason": "json"})
        return None

    file_version = data.get("version", 1)
    if file_version != version:
        logger.warning(f"[Persist] Version mismatch: file={file_version}, expected={version}")
        metrics.inc("persist.error", {"op": "load", "reason": "version"})
        return None

    stored_checksum = data.pop("checksum", None)
    if stored_checksum and _calculate_checksum(_dump(data)) != stored_checksum:
        logger.warning("[Persist] Checksum mismatch")
        metrics.inc("persist.error", {"op": "load", "reason": "checksum"})
        return None

    workspace = data.get("workspace")
    try:
        problems = validate_tree(node_from_dict(workspace["tree"]))
    except (KeyError, TypeError, ValueError) as e:
        problems = [f"malformed tree: {e}"]
    if problems:
        logger.warning(f"[Persist] Invalid tree: {'; '.join(problems)}")
        metrics.inc("persist.error", {"op": "load", "reason": "tree"})
        return None

    logger.info(f"[Persist] Loaded workspace with {len(workspace.get('groups', {}))} groups")
    return workspace


def delete(path: Path | None = None) -> bool:
    """删除快照文件

    Args:
        path: 文件路径

    Returns:
        是否成功
    """
    path = path or PERSIST_FILE

    try:
        if path.exists():
            os.unlink(path)
            logger.info(f"[Persist] Deleted: {path}")
        return True
    except OSError as e:
        logger.error(f"[Persist] Delete failed: {e}")
        return False
