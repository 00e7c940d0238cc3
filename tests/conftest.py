"""Pytest 配置"""

import pytest

from termresurrect.telemetry import metrics


@pytest.fixture(autouse=True)
def reset_metrics():
    """每次测试前重置指标"""
    metrics.reset()
    yield
    metrics.reset()
