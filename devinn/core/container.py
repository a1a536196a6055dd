"""
服务容器

进程启动时构建一次，挂在 app.state 上，端点通过 Depends(get_container) 获取。
测试中直接用假的依赖构造各个服务即可。
"""

from dataclasses import dataclass
from typing import Dict
from fastapi import Request
from loguru import logger

from devinn.core.config import Settings
from devinn.core.logging_config import log_function_call
from devinn.schemas.content import Platform
from devinn.services.ai.content_analyzer import ContentAnalyzer
from devinn.services.ai.gemini_service import GeminiService
from devinn.services.ai.recommendation_engine import RecommendationEngine
from devinn.services.ai.travel_plan_generator import TravelPlanGenerator
from devinn.services.browser_service import BrowserAutomationService
from devinn.services.content_extraction_service import ContentExtractionService
from devinn.services.extractors import (
    BaseExtractor,
    BilibiliExtractor,
    DouyinExtractor,
    ExtractionPolicy,
    MafengwoExtractor,
    XiaohongshuExtractor,
)
from devinn.services.plan_generation import BookingSuggestionService, RouteOptimizer
from devinn.tools.gemini_client import GeminiClient
from devinn.tools.geo import get_distance_metric


@dataclass
class ServiceContainer:
    settings: Settings
    browser: BrowserAutomationService
    extraction: ContentExtractionService
    gemini: GeminiService
    analyzer: ContentAnalyzer
    planner: TravelPlanGenerator
    recommender: RecommendationEngine

    @log_function_call
    async def shutdown(self):
        await self.browser.close()


def build_extractors(browser: BrowserAutomationService, policy: ExtractionPolicy) -> Dict[Platform, BaseExtractor]:
    return {
        Platform.XIAOHONGSHU: XiaohongshuExtractor(browser, policy),
        Platform.BILIBILI: BilibiliExtractor(browser, policy),
        Platform.DOUYIN: DouyinExtractor(browser, policy),
        Platform.MAFENGWO: MafengwoExtractor(browser, policy),
    }


@log_function_call
def build_container(settings: Settings) -> ServiceContainer:
    """按配置组装所有服务"""
    browser = BrowserAutomationService(settings)
    policy = ExtractionPolicy.from_settings(settings)
    extraction = ContentExtractionService(
        build_extractors(browser, policy),
        retry_attempts=settings.EXTRACTION_RETRY_ATTEMPTS,
        retry_delay=settings.EXTRACTION_RETRY_DELAY,
    )

    gemini = GeminiService(
        GeminiClient(settings),
        retry_attempts=settings.LLM_RETRY_ATTEMPTS,
        retry_delay=settings.LLM_RETRY_DELAY,
    )
    analyzer = ContentAnalyzer(gemini)
    planner = TravelPlanGenerator(
        analyzer,
        gemini,
        route_optimizer=RouteOptimizer(get_distance_metric(settings.ROUTE_DISTANCE_METRIC)),
        booking=BookingSuggestionService(),
    )

    logger.info(
        f"📦 服务容器已创建: 真实抓取={'开启' if policy.real_extraction else '关闭'}, "
        f"失败策略={policy.on_failure}, 距离度量={settings.ROUTE_DISTANCE_METRIC}"
    )
    return ServiceContainer(
        settings=settings,
        browser=browser,
        extraction=extraction,
        gemini=gemini,
        analyzer=analyzer,
        planner=planner,
        recommender=RecommendationEngine(gemini),
    )


def get_container(request: Request) -> ServiceContainer:
    """FastAPI 依赖：取出 lifespan 中创建的容器"""
    return request.app.state.container
