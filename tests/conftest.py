"""pytest 全局配置和 fixtures

提供测试所需的假 LLM、Mock 浏览器页面和示例数据。
"""

import json
from typing import List, Union
from unittest.mock import AsyncMock, MagicMock

import pytest

from devinn.core.config import Settings
from devinn.schemas.content import (
    ActivityType,
    Author,
    ContentStats,
    ExtractedActivity,
    ExtractedContent,
    ExtractedLocation,
    Platform,
)
from devinn.schemas.travel_plan import UserRequirements
from devinn.tools.gemini_client import LLMClient


# ============================================================================
# 假 LLM
# ============================================================================

class FakeLLM(LLMClient):
    """按顺序返回预设回复的 LLM，回复为异常实例时抛出"""

    def __init__(self, responses: List[Union[str, Exception]] = None):
        self.responses = list(responses or [])
        self.prompts: List[str] = []

    @property
    def call_count(self) -> int:
        return len(self.prompts)

    async def complete(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if not self.responses:
            raise RuntimeError("没有预设的模型回复")
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


@pytest.fixture
def make_llm():
    """用法: llm = make_llm(["回复1", RuntimeError("超时")])"""
    return FakeLLM


# ============================================================================
# Mock Fixtures
# ============================================================================

@pytest.fixture
def mock_page():
    """模拟 Playwright Page 对象"""
    page = AsyncMock()
    page.url = "https://www.xiaohongshu.com/explore/abc"
    page.title = AsyncMock(return_value="测试页面")
    page.goto = AsyncMock()
    page.close = AsyncMock()
    page.wait_for_selector = AsyncMock()
    page.query_selector = AsyncMock(return_value=None)
    page.query_selector_all = AsyncMock(return_value=[])
    page.evaluate = AsyncMock(return_value=None)
    page.add_init_script = AsyncMock()
    page.mouse = MagicMock()
    page.mouse.move = AsyncMock()
    page.context = MagicMock()
    page.context.close = AsyncMock()
    page.set_default_timeout = MagicMock()
    page.set_default_navigation_timeout = MagicMock()
    return page


@pytest.fixture
def test_settings():
    """关闭真实抓取、重试不等待的配置"""
    return Settings(
        APP_ENV="development",
        ENABLE_REAL_EXTRACTION=False,
        EXTRACTION_FAILURE_POLICY="mock",
        EXTRACTION_RETRY_ATTEMPTS=2,
        EXTRACTION_RETRY_DELAY=0,
        LLM_RETRY_ATTEMPTS=3,
        LLM_RETRY_DELAY=0,
        LOG_TO_FILE=False,
    )


# ============================================================================
# 示例数据
# ============================================================================

@pytest.fixture
def sample_content():
    """一条东京美食笔记"""
    return ExtractedContent(
        title="东京三日美食之旅",
        description="拉面、寿司、甜品一网打尽",
        platform=Platform.XIAOHONGSHU,
        locations=[
            ExtractedLocation(name="筑地市场", address="东京都中央区", coordinates=(35.6654, 139.7707),
                              type=ActivityType.ATTRACTION),
            ExtractedLocation(name="一兰拉面", coordinates=(35.6895, 139.7006), type=ActivityType.RESTAURANT),
        ],
        activities=[
            ExtractedActivity(name="品尝拉面", description="经典豚骨拉面", category="美食体验",
                              estimated_cost=100, duration=60, tips=["避开高峰"]),
        ],
        tags=["东京", "美食"],
        author=Author(name="小王"),
        stats=ContentStats(likes=1000, comments=100, shares=50),
    )


@pytest.fixture
def sample_requirements():
    return UserRequirements(duration=2, travelers=2, budget=5000, interests=["美食"])


@pytest.fixture
def analysis_json():
    """模型返回的分析结果"""
    return json.dumps({
        "locations": [{"name": "筑地市场", "type": "ATTRACTION", "popularity_score": 80, "mentioned_count": 1}],
        "activities": [{"name": "品尝拉面", "category": "DINING", "popularity_score": 70}],
        "themes": ["美食", "文化"],
        "quality_score": 85,
        "recommendations": ["早点去筑地市场"],
        "sentiment": {"overall_sentiment": "POSITIVE"},
        "travel_insights": {"travel_style": ["美食", "休闲", "城市"], "budget_level": "MID_RANGE"},
    }, ensure_ascii=False)


@pytest.fixture
def plan_json():
    """模型返回的两天行程，活动故意乱序且缺少 id/order"""
    return json.dumps({
        "title": "东京两日游",
        "destination": "东京",
        "days": [
            {
                "date": "2024-05-01",
                "title": "美食之旅",
                "theme": "美食",
                "activities": [
                    {"type": "ATTRACTION", "title": "浅草寺", "estimatedCost": 0,
                     "location": {"name": "浅草寺", "coordinates": [35.7148, 139.7967]}},
                    {"type": "RESTAURANT", "title": "一兰拉面", "estimatedCost": 100,
                     "location": {"name": "一兰拉面", "coordinates": [35.6895, 139.7006]}},
                    {"type": "HOTEL", "title": "入住酒店", "estimatedCost": 500,
                     "location": {"name": "新宿酒店", "coordinates": [35.6900, 139.7000]}},
                ],
            },
            {
                "date": "2024-05-02",
                "title": "购物日",
                "theme": "购物",
                "activities": [
                    {"type": "ACTIVITY", "title": "银座购物", "estimatedCost": "¥300",
                     "location": {"name": "银座", "coordinates": [35.6717, 139.7650]}},
                ],
            },
        ],
    }, ensure_ascii=False)


@pytest.fixture
def sample_plan(plan_json):
    from devinn.services.ai.gemini_service import format_travel_plan
    plan = format_travel_plan(plan_json, 2)
    return plan.model_copy(update={"id": "plan-1", "note_id": "note-1"})

