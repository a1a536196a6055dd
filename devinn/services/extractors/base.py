"""
平台内容提取器基类
"""

import asyncio
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence
from loguru import logger
from playwright.async_api import Page

from devinn.core.config import Settings
from devinn.core.exceptions import ExtractionError, InvalidURLError
from devinn.schemas.content import ActivityType, ExtractedContent, ExtractedLocation, Platform
from devinn.services.browser_service import BrowserAutomationService
from devinn.tools.url_utils import is_valid_url

FAILURE_MOCK = "mock"
FAILURE_PROPAGATE = "propagate"


@dataclass(frozen=True)
class ExtractionPolicy:
    """抓取策略

    real_extraction: 是否真正打开浏览器抓取，关闭时直接返回示例数据
    on_failure: 抓取失败时 mock（记录日志并返回示例数据）或 propagate（抛出 ExtractionError）
    """
    real_extraction: bool = False
    on_failure: str = FAILURE_MOCK

    def __post_init__(self):
        if self.on_failure not in (FAILURE_MOCK, FAILURE_PROPAGATE):
            raise ValueError(f"未知的失败处理策略: {self.on_failure}")

    @classmethod
    def from_settings(cls, settings: Settings) -> "ExtractionPolicy":
        return cls(
            real_extraction=settings.real_extraction_enabled,
            on_failure=settings.EXTRACTION_FAILURE_POLICY.lower(),
        )


class BaseExtractor(ABC):
    """平台提取器基类

    子类只需声明等待选择器、解析页面和示例数据，抓取流程与失败处理在这里统一完成。
    """

    platform: Platform
    platform_name: str = ""
    # 等待正文出现的选择器与超时（毫秒）
    ready_selectors: Sequence[str] = ()
    ready_timeout: int = 10000

    def __init__(
        self,
        browser: BrowserAutomationService,
        policy: Optional[ExtractionPolicy] = None,
        settle_delay: float = 3.0,
    ):
        self.browser = browser
        self.policy = policy or ExtractionPolicy()
        # 正文出现后再等待动态内容渲染的秒数
        self.settle_delay = settle_delay

    async def extract(self, url: str) -> ExtractedContent:
        """提取单个链接的内容"""
        if not self.validate_url(url):
            raise InvalidURLError(url)

        if not self.policy.real_extraction:
            logger.info(f"🧪 {self.platform_name}: 未开启真实抓取，使用示例数据 {url}")
            return self.get_mock_content(url)

        logger.info(f"🔍 开始提取{self.platform_name}内容: {url}")
        page = None
        try:
            page = await self.browser.create_page()
            await self.browser.bypass_anti_bot(page)
            await self.browser.navigate_to_page(page, url)
            await self.wait_for_content(page)
            content = await self.parse_page(page, url)
            logger.info(f"✅ {self.platform_name}内容提取成功: {content.title}")
            return content
        except Exception as e:
            return self.handle_failure(url, e)
        finally:
            if page is not None:
                await self.browser.close_page(page)

    def handle_failure(self, url: str, error: Exception) -> ExtractedContent:
        if self.policy.on_failure == FAILURE_PROPAGATE:
            logger.error(f"❌ {self.platform_name}内容提取失败: {url}, {error}")
            raise ExtractionError(self.platform.value, url, message=f"{self.platform_name}内容提取失败: {error}") from error

        logger.warning(f"⚠️ {self.platform_name}内容提取失败，使用示例数据: {url}, {error}")
        return self.get_mock_content(url)

    async def check_status(self) -> bool:
        """平台可用性探测，默认可用"""
        return True

    async def probe_browser(self) -> bool:
        """能创建并关闭页面即视为可用；未开启真实抓取时直接可用"""
        if not self.policy.real_extraction:
            return True
        try:
            page = await self.browser.create_page()
            await self.browser.close_page(page)
            return True
        except Exception as e:
            logger.warning(f"⚠️ {self.platform_name}状态检查失败: {e}")
            return False

    def validate_url(self, url: str) -> bool:
        return is_valid_url(url)

    async def wait_for_content(self, page: Page):
        """等待正文出现；超时只记录警告，继续按当前页面解析"""
        if self.ready_selectors:
            ready = await self.browser.wait_for_any_selector(page, self.ready_selectors, self.ready_timeout)
            if not ready:
                logger.warning(f"⚠️ {self.platform_name}页面加载超时，尝试继续提取")
        if self.settle_delay:
            await asyncio.sleep(self.settle_delay)

    @abstractmethod
    async def parse_page(self, page: Page, url: str) -> ExtractedContent:
        ...

    @abstractmethod
    def get_mock_content(self, url: str = "") -> ExtractedContent:
        ...

    # ------------------------------------------------------------------
    # 选择器工具
    # ------------------------------------------------------------------

    async def first_text(self, page: Page, selectors: Iterable[str]) -> Optional[str]:
        """按顺序尝试选择器，返回第一个非空文本"""
        for selector in selectors:
            text = await self.browser.extract_text(page, selector)
            if text:
                return text
        return None

    async def first_attribute(self, page: Page, selectors: Iterable[str], attributes: Iterable[str]) -> Optional[str]:
        for selector in selectors:
            for attribute in attributes:
                value = await self.browser.extract_attribute(page, selector, attribute)
                if value:
                    return value
        return None

    async def all_texts(self, page: Page, selectors: Iterable[str]) -> List[str]:
        """返回第一个有结果的选择器匹配到的全部文本"""
        for selector in selectors:
            texts = await self.browser.extract_multiple_texts(page, selector)
            if texts:
                return texts
        return []

    async def all_attributes(self, page: Page, selectors: Iterable[str], attributes: Iterable[str]) -> List[str]:
        for selector in selectors:
            for attribute in attributes:
                values = await self.browser.extract_multiple_attributes(page, selector, attribute)
                if values:
                    return values
        return []

    @staticmethod
    def build_locations(names: Iterable[str], with_address: bool = True) -> List[ExtractedLocation]:
        """关键词转地点，坐标需地理编码，暂置为 (0, 0)"""
        return [
            ExtractedLocation(
                name=name,
                address=name if with_address else "",
                coordinates=(0.0, 0.0),
                type=ActivityType.ATTRACTION,
            )
            for name in names
        ]

    @staticmethod
    def clean_tags(raw_tags: Iterable[str]) -> List[str]:
        tags: List[str] = []
        for tag in raw_tags:
            cleaned = tag.replace("#", "").strip()
            if cleaned and cleaned not in tags:
                tags.append(cleaned)
        return tags
