"""Pytest 配置"""

import pytest

from termlayout.telemetry import metrics
from termlayout.workspace import Direction, SplitNode, group_node


@pytest.fixture(autouse=True)
def reset_metrics():
    """每次测试前重置指标"""
    metrics.reset()
    yield
    metrics.reset()


@pytest.fixture
def single():
    """只有一个 group 的根"""
    return group_node("g1")


@pytest.fixture
def pair():
    """左右两个 group：g1 | g2"""
    return SplitNode(
        id="s1",
        direction=Direction.VERTICAL,
        children=(group_node("g1"), group_node("g2")),
        sizes=(50.0, 50.0),
    )


@pytest.fixture
def nested():
    """g1 | (g2 / g3)，外层 30/70，内层 40/60"""
    inner = SplitNode(
        id="s2",
        direction=Direction.HORIZONTAL,
        children=(group_node("g2"), group_node("g3")),
        sizes=(40.0, 60.0),
    )
    return SplitNode(
        id="s1",
        direction=Direction.VERTICAL,
        children=(group_node("g1"), inner),
        sizes=(30.0, 70.0),
    )


@pytest.fixture
def triple():
    """三等分的水平 split"""
    return SplitNode(
        id="s3",
        direction=Direction.HORIZONTAL,
        children=(group_node("a"), group_node("b"), group_node("c")),
        sizes=(33.33, 33.34, 33.33),
    )
